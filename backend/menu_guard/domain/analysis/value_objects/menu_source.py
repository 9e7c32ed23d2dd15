"""Menu source value objects.

An analysis request carries at most three candidate menu sources; exactly
one of them is analyzed, chosen by priority URL > image > text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from menu_guard.domain.analysis.exceptions import (
    InvalidImagePayloadError,
    MissingMenuSourceError,
)


class MenuSourceKind(str, Enum):
    """Kind of menu input."""

    URL = "url"
    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class ImagePayload:
    """Inlined image: base64 data plus MIME type."""

    data: str
    mime_type: str

    def __post_init__(self) -> None:
        if not self.data:
            raise InvalidImagePayloadError("Image payload has no data")
        if not self.mime_type.startswith("image/"):
            raise InvalidImagePayloadError(f"Unsupported image MIME type: {self.mime_type}")

    def as_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    @classmethod
    def from_wire(cls, raw: Any) -> Optional["ImagePayload"]:
        """Parse `{"data": ..., "mimeType": ...}`; falsy input means no image."""
        if not raw:
            return None
        if not isinstance(raw, dict):
            raise InvalidImagePayloadError("Image payload must be an object")
        return cls(data=str(raw.get("data") or ""), mime_type=str(raw.get("mimeType") or ""))

    def to_wire(self) -> Dict[str, str]:
        return {"data": self.data, "mimeType": self.mime_type}


@dataclass(frozen=True)
class MenuSource:
    """The single menu source selected for analysis."""

    kind: MenuSourceKind
    value: str = ""
    image: Optional[ImagePayload] = None


@dataclass(frozen=True)
class AnalysisRequest:
    """
    Value object: transient, request-scoped analysis input.

    Example:
        >>> req = AnalysisRequest(allergies="Peanuts", menu_text="Pad Thai")
        >>> req.menu_source().kind
        <MenuSourceKind.TEXT: 'text'>
    """

    allergies: str
    preferences: str = ""
    menu_text: str = ""
    image_payload: Optional[ImagePayload] = None
    menu_url: str = ""

    def menu_source(self) -> MenuSource:
        """
        Pick the menu source to analyze.

        Returns:
            URL if non-blank, else the image if present, else non-blank text

        Raises:
            MissingMenuSourceError: If no source is present
        """
        if self.menu_url and self.menu_url.strip():
            return MenuSource(kind=MenuSourceKind.URL, value=self.menu_url.strip())
        if self.image_payload is not None:
            return MenuSource(kind=MenuSourceKind.IMAGE, image=self.image_payload)
        if self.menu_text and self.menu_text.strip():
            return MenuSource(kind=MenuSourceKind.TEXT, value=self.menu_text)
        raise MissingMenuSourceError()

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "AnalysisRequest":
        """
        Build from the gateway `analyze` payload (camelCase keys).

        The image is only parsed when the URL is blank; a URL request
        ignores it entirely.
        """
        menu_url = str(data.get("menuUrl") or "")
        image_payload = None
        if not menu_url.strip():
            image_payload = ImagePayload.from_wire(data.get("imagePayload"))
        return cls(
            allergies=str(data.get("allergies") or ""),
            preferences=str(data.get("preferences") or ""),
            menu_text=str(data.get("menuText") or ""),
            image_payload=image_payload,
            menu_url=menu_url,
        )
