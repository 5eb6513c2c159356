"""Outbound HTTP clients."""
from .service_clients import ItemServiceClient, OrderServiceClient, create_service_clients

__all__ = ["ItemServiceClient", "OrderServiceClient", "create_service_clients"]
