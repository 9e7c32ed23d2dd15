"""Port (interface) for places providers."""

from typing import List, Protocol

from menu_guard.domain.places.entities import Restaurant


class IPlacesProvider(Protocol):
    """
    Interface for nearby-restaurant lookup.

    Implementations can be:
    - Google Places (nearby search + per-place details)
    - Stub provider (for testing)
    """

    async def find_nearby_restaurants(
        self, latitude: float, longitude: float
    ) -> List[Restaurant]:
        """
        Find restaurants around a location.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees

        Returns:
            Up to MAX_RESULTS restaurants; places whose details could not be
            fetched are left out

        Raises:
            PlacesAPIError: If the nearby search itself fails
        """
        ...
