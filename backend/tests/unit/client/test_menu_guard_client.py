"""Unit tests for the backend HTTP client, image preparation and guest store."""

import base64
import io
import json

import httpx
import pytest
from PIL import Image

from menu_guard.app import app
from menu_guard.client.gateway_client import GatewayClientError, MenuGuardClient
from menu_guard.client.guest_store import GUEST_ALLERGIES_KEY, GuestAllergyStore
from menu_guard.client.image import (
    IMAGE_PROCESSING_ERROR,
    ImageProcessingError,
    prepare_image,
)
from menu_guard.domain.account.entities.user_profile import DEFAULT_ALLERGIES
from menu_guard.domain.analysis.entities.analysis_result import SafetyLevel
from menu_guard.domain.chat.entities import ChatMessage, ChatRole

BASE_URL = "http://menu-guard.test"


@pytest.fixture
def asgi_transport():
    app.state.dispatcher = None
    yield httpx.ASGITransport(app=app)
    app.state.dispatcher = None


def _png(width, height, mode="RGBA"):
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color=(200, 30, 30, 255)[: len(mode)]).save(
        buffer, format="PNG"
    )
    return buffer.getvalue()


class TestPrepareImage:
    def test_downscales_longest_side_to_800(self):
        payload = prepare_image(_png(1600, 1200))

        assert payload.mime_type == "image/jpeg"
        with Image.open(io.BytesIO(base64.b64decode(payload.data))) as img:
            assert img.format == "JPEG"
            assert img.size == (800, 600)
            assert img.mode == "RGB"

    def test_small_images_are_not_upscaled(self):
        payload = prepare_image(_png(300, 200, mode="RGB"))

        with Image.open(io.BytesIO(base64.b64decode(payload.data))) as img:
            assert img.size == (300, 200)

    def test_corrupt_input(self):
        with pytest.raises(ImageProcessingError) as exc:
            prepare_image(b"definitely not an image")
        assert str(exc.value) == IMAGE_PROCESSING_ERROR


class TestGuestAllergyStore:
    def test_default_when_missing(self, tmp_path):
        assert GuestAllergyStore(tmp_path / "storage.json").load() == DEFAULT_ALLERGIES

    def test_round_trip_keeps_other_keys(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        store = GuestAllergyStore(path)

        store.save("Sesame")

        assert store.load() == "Sesame"
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "theme": "dark",
            GUEST_ALLERGIES_KEY: "Sesame",
        }

    def test_corrupt_file_falls_back_to_default(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")

        assert GuestAllergyStore(path).load() == DEFAULT_ALLERGIES


class TestMenuGuardClient:
    @pytest.mark.asyncio
    async def test_analyze_and_summarize(self, asgi_transport, pad_thai_menu):
        async with MenuGuardClient(BASE_URL, transport=asgi_transport) as client:
            items = await client.analyze_menu("Peanuts", "", menu_text=pad_thai_menu)
            summary = await client.summarize_safe_options(items, "Peanuts", "")

        assert items[0].item_name == "Pad Thai"
        assert items[0].safety_level is SafetyLevel.UNSAFE
        assert summary.startswith("Stub response")

    @pytest.mark.asyncio
    async def test_continue_chat(self, asgi_transport):
        history = [ChatMessage(ChatRole.USER, "Any vegan dishes?")]

        async with MenuGuardClient(BASE_URL, transport=asgi_transport) as client:
            reply = await client.continue_chat(history, "Any vegan dishes?")

        assert reply == "Stub reply to: Any vegan dishes?"

    @pytest.mark.asyncio
    async def test_find_nearby_restaurants(self, asgi_transport):
        async with MenuGuardClient(BASE_URL, transport=asgi_transport) as client:
            restaurants = await client.find_nearby_restaurants(45.46, 9.19)

        assert restaurants[0].website == "https://trattoria.example/menu"
        assert restaurants[0].is_open is True

    @pytest.mark.asyncio
    async def test_server_error_message_surfaces(self, asgi_transport):
        async with MenuGuardClient(BASE_URL, transport=asgi_transport) as client:
            with pytest.raises(GatewayClientError) as exc:
                await client.analyze_menu("Peanuts", "")

        assert exc.value.status_code == 400
        assert str(exc.value) == "No menu content provided for analysis."

    @pytest.mark.asyncio
    async def test_error_without_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))

        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            with pytest.raises(GatewayClientError) as exc:
                await client.fetch_config()

        assert str(exc.value) == "Request failed with status 502"

    @pytest.mark.asyncio
    async def test_account_round_trip(self, asgi_transport, pad_thai_results):
        async with MenuGuardClient(BASE_URL, transport=asgi_transport) as client:
            assert await client.get_profile() is None
            await client.sign_up("ada@example.com", "pw-1")

            profile = await client.log_in("ada@example.com", "pw-1")
            assert client.access_token
            assert profile.username == "ada"

            profile = await client.add_analysis_to_history(
                pad_thai_results, "Peanuts", "", "Pasted Text"
            )
            assert profile.analysis_history[0].result == pad_thai_results

            await client.log_out()
            assert client.access_token is None

    @pytest.mark.asyncio
    async def test_log_in_ignores_stale_token(self, asgi_transport):
        async with MenuGuardClient(
            BASE_URL, transport=asgi_transport, access_token="stale.expired.token"
        ) as client:
            await client.sign_up("ada@example.com", "pw-1")
            await client.request_password_reset("ada@example.com")

            profile = await client.log_in("ada@example.com", "pw-1")

        assert profile.email == "ada@example.com"
        assert client.access_token != "stale.expired.token"

    @pytest.mark.asyncio
    async def test_rejected_token_is_dropped(self, asgi_transport):
        async with MenuGuardClient(
            BASE_URL, transport=asgi_transport, access_token="stale.expired.token"
        ) as client:
            with pytest.raises(GatewayClientError) as exc:
                await client.continue_chat([ChatMessage(ChatRole.USER, "Hi")], "Hi")
            assert exc.value.status_code == 401
            assert client.access_token is None

            reply = await client.continue_chat([ChatMessage(ChatRole.USER, "Hi")], "Hi")

        assert reply == "Stub reply to: Hi"

    @pytest.mark.asyncio
    async def test_unauthorized_error_message(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(401, json={"error": "Missing authorization token"})
        )

        async with MenuGuardClient(BASE_URL, transport=transport) as client:
            with pytest.raises(GatewayClientError) as exc:
                await client.sign_up("ada@example.com", "pw-1")

        assert str(exc.value) == "Missing authorization token"

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        client = MenuGuardClient(BASE_URL)
        with pytest.raises(RuntimeError):
            await client.fetch_config()
