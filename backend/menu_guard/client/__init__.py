"""Python client for the Menu Guard backend."""

from menu_guard.client.gateway_client import GatewayClientError, MenuGuardClient
from menu_guard.client.guest_store import GuestAllergyStore
from menu_guard.client.image import ImageProcessingError, prepare_image
from menu_guard.client.session import AppState, MenuGuardSession

__all__ = [
    "AppState",
    "GatewayClientError",
    "GuestAllergyStore",
    "ImageProcessingError",
    "MenuGuardClient",
    "MenuGuardSession",
    "prepare_image",
]
