"""Google Places API client - Implements IPlacesProvider port.

Key Features:
- Nearby search (1.5 km radius, restaurants only)
- Concurrent per-place details lookup, capped at 12 places
- Partial results: a failed details lookup drops that place only
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from menu_guard.domain.analysis.exceptions import PlacesAPIError
from menu_guard.domain.places.entities import (
    MAX_RESULTS,
    PLACE_TYPE,
    SEARCH_RADIUS_M,
    Restaurant,
)

logger = logging.getLogger(__name__)

DETAILS_FIELDS = (
    "place_id,name,vicinity,website,photos,rating,user_ratings_total,opening_hours"
)


class PlaceDetailsError(Exception):
    """Details lookup for a single place did not return a result."""

    def __init__(self, place_id: str, status: str):
        self.place_id = place_id
        self.status = status
        super().__init__(f"Place details fetch failed for {place_id}: {status}")


class GooglePlacesClient:
    """
    Google Places API client implementing IPlacesProvider port.

    Example:
        >>> async with GooglePlacesClient(api_key="AIza...") as client:
        ...     restaurants = await client.find_nearby_restaurants(45.46, 9.19)
        ...     print([r.name for r in restaurants])
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/place"
    TIMEOUT_S = 10.0

    def __init__(
        self,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize Google Places client.

        Args:
            api_key: Google Maps API key
            transport: Optional httpx transport (tests)
        """
        self._api_key = api_key
        self._transport = transport
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GooglePlacesClient":
        """Async context manager entry."""
        self._session = httpx.AsyncClient(
            timeout=httpx.Timeout(self.TIMEOUT_S),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        if self._session:
            await self._session.aclose()
            self._session = None

    def photo_url(self, photo_reference: str) -> str:
        return (
            f"{self.BASE_URL}/photo?maxwidth=400"
            f"&photoreference={photo_reference}&key={self._api_key}"
        )

    async def find_nearby_restaurants(
        self, latitude: float, longitude: float
    ) -> List[Restaurant]:
        """
        Restaurants near a location, with details.

        Implements IPlacesProvider.find_nearby_restaurants() port.

        Returns:
            Up to 12 restaurants in search order; places whose details
            lookup failed are omitted

        Raises:
            PlacesAPIError: Nearby search returned a status other than
                OK or ZERO_RESULTS
            httpx.HTTPError: Network failure on the nearby search
        """
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")

        response = await self._session.get(
            f"{self.BASE_URL}/nearbysearch/json",
            params={
                "location": f"{latitude},{longitude}",
                "radius": SEARCH_RADIUS_M,
                "type": PLACE_TYPE,
                "key": self._api_key,
            },
        )
        data = response.json()
        status = data.get("status")

        if status == "ZERO_RESULTS":
            logger.info("No restaurants nearby", extra={"latitude": latitude, "longitude": longitude})
            return []
        if status != "OK" or data.get("results") is None:
            raise PlacesAPIError(str(status), data.get("error_message") or "")

        place_ids = [place["place_id"] for place in data["results"][:MAX_RESULTS]]
        details = await asyncio.gather(
            *(self._get_place_details(place_id) for place_id in place_ids),
            return_exceptions=True,
        )

        restaurants: List[Restaurant] = []
        for place_id, outcome in zip(place_ids, details):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Error fetching place details",
                    extra={"place_id": place_id, "error": str(outcome)},
                )
                continue
            restaurants.append(outcome)

        logger.info(
            "Nearby search complete",
            extra={"found": len(place_ids), "returned": len(restaurants)},
        )
        return restaurants

    async def _get_place_details(self, place_id: str) -> Restaurant:
        assert self._session is not None
        response = await self._session.get(
            f"{self.BASE_URL}/details/json",
            params={"place_id": place_id, "fields": DETAILS_FIELDS, "key": self._api_key},
        )
        data = response.json()
        if data.get("status") != "OK" or not data.get("result"):
            raise PlaceDetailsError(place_id, str(data.get("status")))
        return self._map_to_restaurant(data["result"])

    def _map_to_restaurant(self, place: Dict[str, Any]) -> Restaurant:
        photos = place.get("photos") or []
        opening_hours = place.get("opening_hours")
        return Restaurant(
            place_id=place["place_id"],
            name=place.get("name", ""),
            vicinity=place.get("vicinity", ""),
            website=place.get("website"),
            photo_url=self.photo_url(photos[0]["photo_reference"]) if photos else None,
            rating=place.get("rating"),
            user_ratings_total=place.get("user_ratings_total"),
            is_open=bool((opening_hours or {}).get("open_now", False)),
            opening_hours=opening_hours,
        )
