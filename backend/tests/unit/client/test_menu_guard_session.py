"""Unit tests for MenuGuardSession (client state machine).

The session talks to the real app through httpx.ASGITransport, so every
flow runs against stub providers and in-memory stores.
"""

import json

import httpx
import pytest

from menu_guard.app import app
from menu_guard.client.gateway_client import MenuGuardClient
from menu_guard.client.guest_store import GuestAllergyStore
from menu_guard.client.session import (
    ANALYSIS_FAILED_ERROR,
    INVALID_QR_ERROR,
    MISSING_ALLERGIES_ERROR,
    MISSING_MENU_ERROR,
    NO_WEBSITE_ERROR,
    AppState,
    InvalidStateTransitionError,
    MenuGuardSession,
    MenuInput,
)
from menu_guard.domain.analysis.value_objects.menu_source import ImagePayload
from menu_guard.domain.chat.entities import ChatRole
from menu_guard.domain.places.entities import Restaurant

BASE_URL = "http://menu-guard.test"


class OperationCountingTransport(httpx.AsyncBaseTransport):
    """Delegates to the app and counts gateway operations by type."""

    def __init__(self, inner):
        self.inner = inner
        self.operations = []

    async def handle_async_request(self, request):
        if request.url.path == "/api":
            self.operations.append(json.loads(request.content)["type"])
        return await self.inner.handle_async_request(request)


@pytest.fixture
def public_config(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "AIza-test")
    monkeypatch.setenv("SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")


@pytest.fixture
def transport(public_config):
    app.state.dispatcher = None
    yield httpx.ASGITransport(app=app)
    app.state.dispatcher = None


@pytest.fixture
def guest_store(tmp_path):
    return GuestAllergyStore(tmp_path / "storage.json")


async def _ready_session(client, guest_store):
    session = MenuGuardSession(client, guest_store)
    await session.initialize()
    assert session.state is AppState.READY
    return session


class TestMenuInput:
    def test_target_labels(self):
        image = ImagePayload(data="abc", mime_type="image/jpeg")
        assert MenuInput(url="https://www.bistro.example/menu").target_label() == (
            "www.bistro.example"
        )
        assert MenuInput(image=image, image_name="menu.jpg").target_label() == "Image: menu.jpg"
        assert MenuInput(text="Soup").target_label() == "Pasted Text"

    def test_is_empty(self):
        assert MenuInput(text="  ", url=" ").is_empty()
        assert not MenuInput(text="Soup").is_empty()


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_initialize_loads_config(self, transport, guest_store):
        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = await _ready_session(client, guest_store)

        assert session.config["googleMapsApiKey"] == "AIza-test"
        assert session.profile is None

    @pytest.mark.asyncio
    async def test_initialize_failure(self, transport, guest_store, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL")

        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = MenuGuardSession(client, guest_store)
            await session.initialize()

        assert session.state is AppState.ERROR
        assert "not set on the server" in session.error

    def test_invalid_transition(self, guest_store):
        session = MenuGuardSession(MenuGuardClient(BASE_URL), guest_store)
        with pytest.raises(InvalidStateTransitionError):
            session.reset()


class TestGuestAnalysis:
    @pytest.mark.asyncio
    async def test_analyze_shows_results_and_primes_chat(
        self, transport, guest_store, pad_thai_menu
    ):
        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = await _ready_session(client, guest_store)
            session.menu.text = pad_thai_menu

            results = await session.analyze()

            assert session.state is AppState.RESULTS_SHOWN
            assert [r.item_name for r in results] == ["Pad Thai", "Green Salad"]
            assert session.summary
            assert [m.role for m in session.conversation] == [ChatRole.USER, ChatRole.MODEL]
            assert session.analysis_target is None
            assert session.menu_context == {"text": pad_thai_menu, "url": ""}

            reply = await session.send_chat_message("Is the salad dressing vegan?")

        assert reply == "Stub reply to: Is the salad dressing vegan?"
        assert session.state is AppState.RESULTS_SHOWN
        assert len(session.conversation) == 4
        assert session.conversation[-1].role is ChatRole.MODEL

    @pytest.mark.asyncio
    async def test_guest_has_no_preferences(self, transport, guest_store):
        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = await _ready_session(client, guest_store)

        assert session.allergies == "Peanuts, Shellfish, Gluten"
        assert session.preferences == ""

    @pytest.mark.asyncio
    async def test_missing_allergies(self, transport, guest_store):
        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = await _ready_session(client, guest_store)
            session.set_guest_allergies("  ")
            session.menu.text = "Soup"

            assert await session.analyze() is None

        assert session.error == MISSING_ALLERGIES_ERROR
        assert session.state is AppState.READY
        assert guest_store.load() == "  "

    @pytest.mark.asyncio
    async def test_missing_menu(self, transport, guest_store):
        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = await _ready_session(client, guest_store)
            assert await session.analyze() is None

        assert session.error == MISSING_MENU_ERROR

    @pytest.mark.asyncio
    async def test_request_failure_returns_to_ready(self, guest_store):
        def handler(request):
            if request.url.path == "/config":
                return httpx.Response(200, json={"googleMapsApiKey": "k"})
            return httpx.Response(500, json={"error": "upstream exploded"})

        async with MenuGuardClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            session = await _ready_session(client, guest_store)
            session.menu.text = "Soup"

            assert await session.analyze() is None

        assert session.state is AppState.READY
        assert session.error == "upstream exploded"
        assert session.results is None

    @pytest.mark.asyncio
    async def test_malformed_results_return_to_ready(self, guest_store):
        def handler(request):
            if request.url.path == "/config":
                return httpx.Response(200, json={"googleMapsApiKey": "k"})
            return httpx.Response(200, json=[{"itemName": "Soup"}])

        async with MenuGuardClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            session = await _ready_session(client, guest_store)
            session.menu.text = "Soup"

            assert await session.analyze() is None
            assert session.state is AppState.READY
            assert session.error == ANALYSIS_FAILED_ERROR

            assert await session.analyze() is None

        assert session.state is AppState.READY
        assert session.results is None
        assert session.conversation is None


class TestAutoAnalysis:
    @pytest.mark.asyncio
    async def test_restaurant_without_website(self, transport, guest_store):
        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = await _ready_session(client, guest_store)
            restaurants = await session.find_nearby(45.46, 9.19)

            assert session.select_restaurant(restaurants[1]) is False

        assert session.error == NO_WEBSITE_ERROR
        assert session.auto_analysis_trigger == 0

    @pytest.mark.asyncio
    async def test_selected_restaurant_runs_once(self, transport, guest_store):
        restaurant = Restaurant(
            place_id="p1", name="Trattoria", vicinity="", website="https://trattoria.example"
        )

        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = await _ready_session(client, guest_store)
            assert session.select_restaurant(restaurant) is True

            first = await session.run_pending_auto_analysis()
            second = await session.run_pending_auto_analysis()

        assert first == []
        assert second is None
        assert session.menu.url == "https://trattoria.example"
        assert session.state is AppState.RESULTS_SHOWN

    def test_scan_rejects_non_url(self, guest_store):
        session = MenuGuardSession(MenuGuardClient(BASE_URL), guest_store)

        assert session.handle_scan("hello world") is False
        assert session.error == INVALID_QR_ERROR
        assert session.handle_scan(None) is False

    def test_scan_sets_url(self, guest_store):
        session = MenuGuardSession(MenuGuardClient(BASE_URL), guest_store)

        assert session.handle_scan(" https://menu.example/qr ") is True
        assert session.menu.url == "https://menu.example/qr"
        assert session.auto_analysis_trigger == 1

    @pytest.mark.asyncio
    async def test_nearby_failure_sets_location_error(self, transport, guest_store, monkeypatch):
        monkeypatch.setenv("PLACES_PROVIDER", "google")
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY")

        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            session = MenuGuardSession(client, guest_store)
            assert await session.find_nearby(45.46, 9.19) == []

        assert "Google Maps API key" in session.location_error


class TestSignedInAnalysis:
    @pytest.mark.asyncio
    async def test_history_and_quota(self, transport, guest_store, pad_thai_menu):
        counting = OperationCountingTransport(transport)
        async with MenuGuardClient(BASE_URL, transport=counting) as client:
            await client.sign_up("ada@example.com", "pw-1")
            session = await _ready_session(client, guest_store)
            await session.log_in("ada@example.com", "pw-1")
            session.menu.text = pad_thai_menu

            for _ in range(5):
                assert await session.analyze() is not None

            assert len(session.profile.analysis_history) == 5
            assert session.profile.analysis_history[0].input_text == "Pasted Text"

            assert await session.analyze() is None
            assert "monthly analysis limit of 5" in session.error
            assert counting.operations.count("analyze") == 5
            assert session.state is AppState.RESULTS_SHOWN

            await session.log_out()

        assert session.profile is None
        assert session.results is None
        assert session.state is AppState.READY
        assert session.guest_allergies == "Peanuts, Shellfish, Gluten"
