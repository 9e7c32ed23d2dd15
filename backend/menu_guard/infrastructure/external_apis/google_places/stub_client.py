"""Stub places provider for testing."""

from typing import List

from menu_guard.domain.places.entities import Restaurant


class StubPlacesProvider:
    """
    Stub implementation of IPlacesProvider.

    Returns two fixed restaurants regardless of location.
    """

    async def __aenter__(self) -> "StubPlacesProvider":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        return None

    async def find_nearby_restaurants(
        self, latitude: float, longitude: float
    ) -> List[Restaurant]:
        return [
            Restaurant(
                place_id="stub-trattoria",
                name="Trattoria Stub",
                vicinity="Via Roma 1",
                website="https://trattoria.example/menu",
                rating=4.5,
                user_ratings_total=120,
                is_open=True,
                opening_hours={"open_now": True},
            ),
            Restaurant(
                place_id="stub-noodle-bar",
                name="Noodle Bar Stub",
                vicinity="Corso Italia 10",
                rating=4.1,
                user_ratings_total=58,
            ),
        ]
