"""Restaurant entity - nearby places, never persisted."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

SEARCH_RADIUS_M = 1500
MAX_RESULTS = 12
PLACE_TYPE = "restaurant"


@dataclass(frozen=True)
class Restaurant:
    """
    Entity: Restaurant sourced per request from the places API.

    Example:
        Restaurant(
            place_id="ChIJ...",
            name="Trattoria da Mario",
            vicinity="Via Roma 1",
            website="https://trattoria.example",
            is_open=True,
        )
    """

    place_id: str
    name: str
    vicinity: str
    website: Optional[str] = None
    photo_url: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    is_open: bool = False
    opening_hours: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation served by the gateway."""
        return {
            "place_id": self.place_id,
            "name": self.name,
            "vicinity": self.vicinity,
            "website": self.website,
            "photoUrl": self.photo_url,
            "rating": self.rating,
            "user_ratings_total": self.user_ratings_total,
            "isOpen": self.is_open,
            "opening_hours": self.opening_hours,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Restaurant":
        return cls(
            place_id=data["place_id"],
            name=data["name"],
            vicinity=data.get("vicinity", ""),
            website=data.get("website"),
            photo_url=data.get("photoUrl"),
            rating=data.get("rating"),
            user_ratings_total=data.get("user_ratings_total"),
            is_open=bool(data.get("isOpen", False)),
            opening_hours=data.get("opening_hours"),
        )
