"""Find nearby restaurants command."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from menu_guard.domain.analysis.exceptions import (
    MissingCoordinatesError,
    PlacesConfigurationError,
)
from menu_guard.domain.places.entities import Restaurant
from menu_guard.domain.places.ports import IPlacesProvider


def _coordinate(value: Any) -> Optional[float]:
    try:
        coordinate = float(value)
    except (TypeError, ValueError):
        return None
    return coordinate or None


@dataclass
class FindNearbyRestaurantsCommand:
    """Restaurants around a location, partial results tolerated.

    `provider` is None when the server has no places API key.
    """

    provider: Optional[IPlacesProvider]

    async def execute(self, latitude: Any, longitude: Any) -> List[Restaurant]:
        if self.provider is None:
            raise PlacesConfigurationError()

        lat = _coordinate(latitude)
        lng = _coordinate(longitude)
        if lat is None or lng is None:
            raise MissingCoordinatesError()

        return await self.provider.find_nearby_restaurants(lat, lng)

    async def handle(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        restaurants = await self.execute(data.get("latitude"), data.get("longitude"))
        return [restaurant.to_dict() for restaurant in restaurants]
