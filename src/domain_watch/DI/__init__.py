"""Dependency injection."""

from domain_watch.DI.container import Container

__all__ = ["Container"]
