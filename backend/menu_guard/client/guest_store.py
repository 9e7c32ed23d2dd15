"""Local persistence of the guest allergy list."""

import json
import logging
from pathlib import Path
from typing import Union

from menu_guard.domain.account.entities.user_profile import DEFAULT_ALLERGIES

logger = logging.getLogger(__name__)

GUEST_ALLERGIES_KEY = "menu-guard-guest-allergies"


class GuestAllergyStore:
    """
    Single string persisted under a fixed key in a local JSON file.

    Storage failures never propagate: they are logged and the default is
    returned (load) or the value is dropped (save).

    Example:
        >>> store = GuestAllergyStore("~/.menu_guard/storage.json")
        >>> store.load()
        'Peanuts, Shellfish, Gluten'
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()

    def load(self) -> str:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return DEFAULT_ALLERGIES
        except (OSError, ValueError) as e:
            logger.error("Failed to load guest allergies", extra={"error": str(e)})
            return DEFAULT_ALLERGIES

        value = data.get(GUEST_ALLERGIES_KEY) if isinstance(data, dict) else None
        return value if isinstance(value, str) else DEFAULT_ALLERGIES

    def save(self, allergies: str) -> None:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                data = {}
        except (OSError, ValueError):
            data = {}

        data[GUEST_ALLERGIES_KEY] = allergies
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as e:
            logger.error("Failed to save guest allergies", extra={"error": str(e)})
