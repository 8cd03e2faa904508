"""Relayer HTTP client."""

from domain_watch.clients.relayer.relayer_client import RelayerClient

__all__ = ["RelayerClient"]
