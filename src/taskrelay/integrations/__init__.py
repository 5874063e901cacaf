"""Third-party service clients."""

from .monday import MondayAPIError, MondayClient, item_from_payload

__all__ = [
    "MondayAPIError",
    "MondayClient",
    "item_from_payload",
]
