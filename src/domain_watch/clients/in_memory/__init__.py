"""In-memory collaborator implementations."""

from domain_watch.clients.in_memory.entitlement_service import InMemoryEntitlementService

__all__ = ["InMemoryEntitlementService"]
