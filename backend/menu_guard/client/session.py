"""Client orchestration: one explicit application state at a time.

`MenuGuardSession` drives the user-facing flow (initialize, analyze, chat,
nearby restaurants, auto-analysis, login/logout) on top of
`MenuGuardClient`, replacing ad hoc loading flags with `AppState`.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional
from urllib.parse import urlparse

import httpx

from menu_guard.client.gateway_client import GatewayClientError, MenuGuardClient
from menu_guard.client.guest_store import GuestAllergyStore
from menu_guard.client.image import ImageProcessingError, prepare_image
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.account.exceptions import QuotaError
from menu_guard.domain.account.services.quota import MonthlyQuota
from menu_guard.domain.analysis.entities.analysis_result import AnalysisResultItem
from menu_guard.domain.analysis.value_objects.menu_source import ImagePayload
from menu_guard.domain.chat.entities import ChatMessage, ChatRole, start_menu_chat
from menu_guard.domain.places.entities import Restaurant

logger = logging.getLogger(__name__)

MISSING_ALLERGIES_ERROR = "Please list your allergies first."
MISSING_MENU_ERROR = "Please provide a menu as text, an image, a URL, or by scanning a QR code."
INVALID_QR_ERROR = "Scanned QR code does not contain a valid URL."
NO_WEBSITE_ERROR = (
    "This restaurant doesn't have a website listed on Google. "
    "Please find the menu manually."
)
CHAT_FALLBACK_ERROR = "Sorry, I encountered an error."
ANALYSIS_FAILED_ERROR = "An unknown error occurred during analysis."

_CLIENT_ERRORS = (GatewayClientError, httpx.HTTPError)


class AppState(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    ANALYZING = "analyzing"
    RESULTS_SHOWN = "results_shown"
    CHATTING = "chatting"
    ERROR = "error"


TRANSITIONS: Dict[AppState, FrozenSet[AppState]] = {
    AppState.IDLE: frozenset({AppState.INITIALIZING}),
    AppState.INITIALIZING: frozenset({AppState.READY, AppState.ERROR}),
    AppState.READY: frozenset({AppState.READY, AppState.ANALYZING}),
    AppState.ANALYZING: frozenset({AppState.RESULTS_SHOWN, AppState.READY}),
    AppState.RESULTS_SHOWN: frozenset(
        {AppState.CHATTING, AppState.ANALYZING, AppState.READY}
    ),
    AppState.CHATTING: frozenset({AppState.RESULTS_SHOWN, AppState.READY}),
    AppState.ERROR: frozenset({AppState.INITIALIZING}),
}


class InvalidStateTransitionError(Exception):
    def __init__(self, current: AppState, target: AppState):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from {current.value} to {target.value}")


def _is_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return bool(parsed.scheme and parsed.netloc)


@dataclass
class MenuInput:
    """Candidate menu sources as collected from the user."""

    text: str = ""
    url: str = ""
    image: Optional[ImagePayload] = None
    image_name: str = ""

    def is_empty(self) -> bool:
        return not self.text.strip() and self.image is None and not self.url.strip()

    def target_label(self) -> str:
        """Human label of what is being analyzed."""
        if self.url.strip():
            return urlparse(self.url.strip()).hostname or self.url.strip()
        if self.image is not None:
            return f"Image: {self.image_name}"
        return "Pasted Text"


@dataclass
class MenuGuardSession:
    """
    Client-side application state machine.

    Example:
        >>> session = MenuGuardSession(client, GuestAllergyStore(path))
        >>> await session.initialize()
        >>> session.menu.text = "Pad Thai - rice noodles, peanuts"
        >>> results = await session.analyze()
        >>> session.state
        <AppState.RESULTS_SHOWN: 'results_shown'>
    """

    client: MenuGuardClient
    guest_store: GuestAllergyStore
    quota: MonthlyQuota = field(default_factory=MonthlyQuota)

    state: AppState = AppState.IDLE
    error: Optional[str] = None
    config: Dict[str, str] = field(default_factory=dict)
    profile: Optional[UserProfile] = None
    guest_allergies: str = ""
    menu: MenuInput = field(default_factory=MenuInput)
    results: Optional[List[AnalysisResultItem]] = None
    summary: Optional[str] = None
    conversation: Optional[List[ChatMessage]] = None
    menu_context: Optional[Dict[str, str]] = None
    analysis_target: Optional[str] = None
    restaurants: Optional[List[Restaurant]] = None
    location_error: Optional[str] = None
    auto_analysis_trigger: int = 0
    _handled_trigger: int = 0

    def __post_init__(self) -> None:
        self.guest_allergies = self.guest_store.load()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _transition(self, target: AppState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidStateTransitionError(self.state, target)
        logger.debug(
            "State transition", extra={"from": self.state.value, "to": target.value}
        )
        self.state = target

    @property
    def allergies(self) -> str:
        if self.profile is not None:
            return self.profile.allergies or ""
        return self.guest_allergies

    @property
    def preferences(self) -> str:
        """Preferences apply to Pro users only."""
        return self.profile.effective_preferences if self.profile is not None else ""

    def set_guest_allergies(self, allergies: str) -> None:
        self.guest_allergies = allergies
        self.guest_store.save(allergies)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Fetch public config (and the profile when a token is set)."""
        self._transition(AppState.INITIALIZING)
        try:
            self.config = await self.client.fetch_config()
            if self.client.access_token:
                self.profile = await self.client.get_profile()
        except _CLIENT_ERRORS as e:
            logger.error("Initialization failed", extra={"error": str(e)})
            self.error = str(e)
            self._transition(AppState.ERROR)
            return
        self.error = None
        self._transition(AppState.READY)

    async def log_in(self, email: str, password: str) -> UserProfile:
        self.profile = await self.client.log_in(email, password)
        return self.profile

    async def log_out(self) -> None:
        """Sign out; the profile's allergies carry over to guest mode."""
        if self.profile is not None:
            self.guest_store.save(self.profile.allergies or "")
        await self.client.log_out()
        self.profile = None
        self.guest_allergies = self.guest_store.load()
        self.conversation = None
        self.results = None
        if self.state in (AppState.RESULTS_SHOWN, AppState.CHATTING):
            self._transition(AppState.READY)

    def reset(self) -> None:
        """Back to input collection."""
        self.results = None
        self.summary = None
        self.conversation = None
        self.menu_context = None
        self._transition(AppState.READY)

    # ------------------------------------------------------------------
    # Menu input
    # ------------------------------------------------------------------

    def set_menu_image(self, content: bytes, name: str) -> bool:
        try:
            self.menu.image = prepare_image(content)
        except ImageProcessingError as e:
            self.menu.image = None
            self.error = str(e)
            return False
        self.menu.image_name = name
        return True

    def trigger_auto_analysis(self) -> None:
        self.auto_analysis_trigger += 1

    def select_restaurant(self, restaurant: Restaurant) -> bool:
        if not restaurant.website:
            self.error = NO_WEBSITE_ERROR
            return False
        self.menu.url = restaurant.website
        self.restaurants = None
        self.trigger_auto_analysis()
        return True

    def handle_scan(self, data: Optional[str]) -> bool:
        if not data:
            return False
        if not _is_url(data):
            self.error = INVALID_QR_ERROR
            return False
        self.menu.url = data.strip()
        self.trigger_auto_analysis()
        return True

    async def run_pending_auto_analysis(self) -> Optional[List[AnalysisResultItem]]:
        """Run one analysis if the trigger advanced since the last run."""
        if self.auto_analysis_trigger <= self._handled_trigger:
            return None
        self._handled_trigger = self.auto_analysis_trigger
        if self.state in (AppState.RESULTS_SHOWN, AppState.CHATTING):
            self.reset()
        return await self.analyze()

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def _precheck(self) -> Optional[str]:
        if not self.allergies.strip():
            return MISSING_ALLERGIES_ERROR
        if self.menu.is_empty():
            return MISSING_MENU_ERROR
        if self.profile is not None:
            try:
                self.quota.ensure_can_analyze(self.profile)
            except QuotaError as e:
                return str(e)
        return None

    def _abort_analysis(self, message: str) -> None:
        self.error = message
        self.results = None
        self.summary = None
        self.conversation = None
        self._transition(AppState.READY)

    async def analyze(self) -> Optional[List[AnalysisResultItem]]:
        """
        Analyze the current menu input.

        Validation and quota failures set `error` and leave the state
        unchanged; any request or decoding failure sets `error` and returns
        to READY.
        """
        problem = self._precheck()
        if problem:
            self.error = problem
            return None

        self.error = None
        self._transition(AppState.ANALYZING)
        self.results = None
        self.summary = None
        self.conversation = None

        allergies, preferences = self.allergies, self.preferences
        target = self.menu.target_label()
        self.analysis_target = target
        self.menu_context = {"text": self.menu.text, "url": self.menu.url}

        try:
            results = await self.client.analyze_menu(
                allergies,
                preferences,
                menu_text=self.menu.text,
                image=self.menu.image,
                menu_url=self.menu.url,
            )
            self.results = results
            if results:
                self.summary = await self.client.summarize_safe_options(
                    results, allergies, preferences
                )
                self.conversation = start_menu_chat(allergies, preferences, results)
                if self.profile is not None:
                    self.profile = await self.client.add_analysis_to_history(
                        results, allergies, preferences, target
                    )
        except _CLIENT_ERRORS as e:
            logger.warning("Analysis failed", extra={"error": str(e)})
            self._abort_analysis(str(e))
            return None
        except Exception:
            logger.exception("Unexpected analysis failure")
            self._abort_analysis(ANALYSIS_FAILED_ERROR)
            return None
        finally:
            self.analysis_target = None

        self._transition(AppState.RESULTS_SHOWN)
        return self.results

    async def suggest_alternative(self, unsafe_item_name: str) -> str:
        safe_items = [item.item_name for item in self.results or [] if item.is_safe()]
        return await self.client.find_safe_alternative(
            self.allergies,
            self.preferences,
            unsafe_item_name,
            self.menu_context or {},
            safe_items,
        )

    async def send_chat_message(self, message: str) -> Optional[str]:
        """Send a chat turn; failures become a model turn with the error."""
        if self.conversation is None:
            return None

        self._transition(AppState.CHATTING)
        self.conversation = [*self.conversation, ChatMessage(ChatRole.USER, message)]
        try:
            reply = await self.client.continue_chat(self.conversation, message)
        except _CLIENT_ERRORS as e:
            reply = str(e) or CHAT_FALLBACK_ERROR
        self.conversation = [*self.conversation, ChatMessage(ChatRole.MODEL, reply)]
        self._transition(AppState.RESULTS_SHOWN)
        return reply

    async def find_nearby(self, latitude: float, longitude: float) -> List[Restaurant]:
        self.location_error = None
        self.restaurants = None
        try:
            self.restaurants = await self.client.find_nearby_restaurants(latitude, longitude)
        except _CLIENT_ERRORS as e:
            self.location_error = str(e)
            return []
        return self.restaurants
