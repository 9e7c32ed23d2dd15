"""Unit tests for GooglePlacesClient using httpx.MockTransport."""

import httpx
import pytest

from menu_guard.domain.analysis.exceptions import PlacesAPIError
from menu_guard.infrastructure.external_apis.google_places.client import GooglePlacesClient

PLACES = {
    "p1": {
        "place_id": "p1",
        "name": "Trattoria da Mario",
        "vicinity": "Via Roma 1",
        "website": "https://mario.example",
        "photos": [{"photo_reference": "ref-1"}],
        "rating": 4.6,
        "user_ratings_total": 210,
        "opening_hours": {"open_now": True},
    },
    "p2": {"place_id": "p2", "name": "Sushi Zen", "vicinity": "Corso Como 5"},
}


def _transport(nearby: dict, failing=()):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/nearbysearch/json"):
            return httpx.Response(200, json=nearby)
        place_id = request.url.params["place_id"]
        if place_id in failing:
            return httpx.Response(200, json={"status": "NOT_FOUND"})
        return httpx.Response(200, json={"status": "OK", "result": PLACES[place_id]})

    return httpx.MockTransport(handler), requests


class TestFindNearbyRestaurants:
    @pytest.mark.asyncio
    async def test_maps_details_in_search_order(self):
        transport, requests = _transport(
            {"status": "OK", "results": [{"place_id": "p1"}, {"place_id": "p2"}]}
        )

        async with GooglePlacesClient(api_key="maps-key", transport=transport) as client:
            restaurants = await client.find_nearby_restaurants(45.46, 9.19)

        assert [r.name for r in restaurants] == ["Trattoria da Mario", "Sushi Zen"]
        mario, zen = restaurants
        assert mario.is_open is True
        assert mario.photo_url.endswith("photoreference=ref-1&key=maps-key")
        assert zen.website is None
        assert zen.is_open is False
        assert zen.photo_url is None

        nearby_params = requests[0].url.params
        assert nearby_params["location"] == "45.46,9.19"
        assert nearby_params["radius"] == "1500"
        assert nearby_params["type"] == "restaurant"

    @pytest.mark.asyncio
    async def test_failed_details_are_dropped(self):
        transport, _ = _transport(
            {"status": "OK", "results": [{"place_id": "p1"}, {"place_id": "p2"}]},
            failing={"p1"},
        )

        async with GooglePlacesClient(api_key="maps-key", transport=transport) as client:
            restaurants = await client.find_nearby_restaurants(45.46, 9.19)

        assert [r.place_id for r in restaurants] == ["p2"]

    @pytest.mark.asyncio
    async def test_details_capped_at_twelve(self):
        results = [{"place_id": "p2"} for _ in range(20)]
        transport, requests = _transport({"status": "OK", "results": results})

        async with GooglePlacesClient(api_key="maps-key", transport=transport) as client:
            restaurants = await client.find_nearby_restaurants(45.46, 9.19)

        assert len(restaurants) == 12
        assert len(requests) == 13

    @pytest.mark.asyncio
    async def test_zero_results(self):
        transport, requests = _transport({"status": "ZERO_RESULTS", "results": []})

        async with GooglePlacesClient(api_key="maps-key", transport=transport) as client:
            assert await client.find_nearby_restaurants(0.5, 0.5) == []

        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_error_status(self):
        transport, _ = _transport(
            {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
        )

        async with GooglePlacesClient(api_key="bad-key", transport=transport) as client:
            with pytest.raises(PlacesAPIError) as exc:
                await client.find_nearby_restaurants(45.46, 9.19)

        assert exc.value.status == "REQUEST_DENIED"
        assert "Google Places API Error: REQUEST_DENIED" in str(exc.value)

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        client = GooglePlacesClient(api_key="maps-key")
        with pytest.raises(RuntimeError):
            await client.find_nearby_restaurants(45.46, 9.19)
