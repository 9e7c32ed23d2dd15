"""HTTP client for the Menu Guard backend.

Wraps the `/api` gateway envelope, `/config` and the account GraphQL
operations behind typed async methods.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import httpx

from menu_guard.domain.account.entities.history_entry import (
    AnalysisStatus,
    AnalysisType,
    HistoryEntry,
)
from menu_guard.domain.account.entities.user_profile import UserProfile
from menu_guard.domain.analysis.entities.analysis_result import (
    AnalysisResultItem,
    decode_result,
)
from menu_guard.domain.analysis.value_objects.menu_source import ImagePayload
from menu_guard.domain.chat.entities import ChatMessage
from menu_guard.domain.places.entities import Restaurant

logger = logging.getLogger(__name__)

PROFILE_FIELDS = """
    id email username allergies preferences isPro maxAnalysesPerMonth updatedAt
    analysisHistory {
        id createdAt status analysisType inputText allergies preferences
        result { itemName safetyLevel reasoning identifiedAllergens }
    }
"""


class GatewayClientError(Exception):
    """Backend returned an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


def _graphql_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "itemName": item.get("itemName"),
        "safetyLevel": str(item.get("safetyLevel", "")).lower(),
        "reasoning": item.get("reasoning"),
        "identifiedAllergens": item.get("identifiedAllergens"),
    }


def profile_from_graphql(data: Dict[str, Any]) -> UserProfile:
    """Map a GraphQL `UserProfileType` payload to the domain profile."""
    history = [
        HistoryEntry(
            id=int(entry["id"]),
            user_id=data["id"],
            created_at=datetime.fromisoformat(entry["createdAt"]),
            input_text=entry.get("inputText", ""),
            result=decode_result([_graphql_item(i) for i in entry.get("result") or []]),
            allergies=entry.get("allergies", ""),
            preferences=entry.get("preferences", ""),
            status=AnalysisStatus(entry.get("status", "completed")),
            analysis_type=AnalysisType(entry.get("analysisType", "menu_analysis")),
        )
        for entry in data.get("analysisHistory") or []
    ]
    return UserProfile(
        id=data["id"],
        email=data.get("email", ""),
        username=data.get("username", ""),
        allergies=data.get("allergies"),
        preferences=data.get("preferences"),
        is_pro=bool(data.get("isPro")),
        max_analyses_per_month=data.get("maxAnalysesPerMonth"),
        updated_at=datetime.fromisoformat(data["updatedAt"]),
        analysis_history=history,
    )


class MenuGuardClient:
    """
    Async client for the Menu Guard backend.

    Example:
        >>> async with MenuGuardClient("http://localhost:8080") as client:
        ...     items = await client.analyze_menu("Peanuts", "", menu_text="Pad Thai")
    """

    TIMEOUT_S = 60.0

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        access_token: Optional[str] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._session: Optional[httpx.AsyncClient] = None
        self.access_token = access_token

    async def __aenter__(self) -> "MenuGuardClient":
        self._session = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self.TIMEOUT_S),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._session:
            await self._session.aclose()
            self._session = None

    @property
    def session(self) -> httpx.AsyncClient:
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._session

    def _headers(self, authenticated: bool = True) -> Dict[str, str]:
        if authenticated and self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}

    def _raise_for_error(self, response: httpx.Response) -> Any:
        if response.is_success:
            return response.json()
        sent_token = "Authorization" in response.request.headers
        if response.status_code == httpx.codes.UNAUTHORIZED and sent_token:
            # Token expired or revoked server-side; later calls go out as a guest
            logger.info("Dropping rejected access token")
            self.access_token = None
        try:
            message = response.json().get("error")
        except ValueError:
            message = None
        raise GatewayClientError(
            message or f"Request failed with status {response.status_code}",
            status_code=response.status_code,
        )

    # ------------------------------------------------------------------
    # Gateway
    # ------------------------------------------------------------------

    async def _call(self, operation: str, data: Dict[str, Any]) -> Any:
        logger.debug("Calling gateway", extra={"operation": operation})
        response = await self.session.post(
            "/api", json={"type": operation, "data": data}, headers=self._headers()
        )
        return self._raise_for_error(response)

    async def fetch_config(self) -> Dict[str, str]:
        response = await self.session.get("/config")
        config: Dict[str, str] = self._raise_for_error(response)
        return config

    async def analyze_menu(
        self,
        allergies: str,
        preferences: str,
        menu_text: str = "",
        image: Optional[ImagePayload] = None,
        menu_url: str = "",
    ) -> List[AnalysisResultItem]:
        data = await self._call(
            "analyze",
            {
                "allergies": allergies,
                "preferences": preferences,
                "menuText": menu_text,
                "imagePayload": image.to_wire() if image else None,
                "menuUrl": menu_url,
            },
        )
        return [AnalysisResultItem.from_dict(item) for item in data]

    async def summarize_safe_options(
        self, results: Sequence[AnalysisResultItem], allergies: str, preferences: str
    ) -> str:
        data = await self._call(
            "summarize",
            {
                "results": [item.to_dict() for item in results],
                "allergies": allergies,
                "preferences": preferences,
            },
        )
        return str(data["summary"])

    async def find_safe_alternative(
        self,
        allergies: str,
        preferences: str,
        unsafe_item_name: str,
        menu_context: Dict[str, str],
        safe_items: Sequence[str],
    ) -> str:
        data = await self._call(
            "alternative",
            {
                "allergies": allergies,
                "preferences": preferences,
                "unsafeItemName": unsafe_item_name,
                "menuContext": menu_context,
                "safeItems": list(safe_items),
            },
        )
        return str(data["alternative"])

    async def continue_chat(self, history: Sequence[ChatMessage], message: str) -> str:
        """`history` must already end with the new user turn."""
        data = await self._call(
            "chat",
            {"history": [turn.to_dict() for turn in history], "message": message},
        )
        return str(data["reply"])

    async def find_nearby_restaurants(
        self, latitude: float, longitude: float
    ) -> List[Restaurant]:
        data = await self._call(
            "places", {"latitude": latitude, "longitude": longitude}
        )
        return [Restaurant.from_dict(item) for item in data]

    # ------------------------------------------------------------------
    # Account (GraphQL)
    # ------------------------------------------------------------------

    async def graphql(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        """Run a GraphQL operation; `authenticated=False` sends no bearer token."""
        response = await self.session.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
            headers=self._headers(authenticated),
        )
        payload = self._raise_for_error(response)
        errors = payload.get("errors")
        if errors:
            raise GatewayClientError(errors[0].get("message", "GraphQL error"))
        return payload["data"]

    async def log_in(self, email: str, password: str) -> UserProfile:
        data = await self.graphql(
            "mutation($email: String!, $password: String!) { account { "
            "logIn(email: $email, password: $password) { accessToken profile { "
            f"{PROFILE_FIELDS} }} }} }} }}",
            {"email": email, "password": password},
            authenticated=False,
        )
        payload = data["account"]["logIn"]
        self.access_token = payload["accessToken"]
        return profile_from_graphql(payload["profile"])

    async def sign_up(self, email: str, password: str) -> None:
        await self.graphql(
            "mutation($email: String!, $password: String!) { account { "
            "signUp(email: $email, password: $password) } }",
            {"email": email, "password": password},
            authenticated=False,
        )

    async def request_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        await self.graphql(
            "mutation($email: String!, $redirectTo: String) { account { "
            "requestPasswordReset(email: $email, redirectTo: $redirectTo) } }",
            {"email": email, "redirectTo": redirect_to},
            authenticated=False,
        )

    async def log_out(self) -> None:
        if self.access_token:
            await self.graphql("mutation { account { logOut } }")
        self.access_token = None

    async def get_profile(self) -> Optional[UserProfile]:
        data = await self.graphql(f"query {{ account {{ me {{ {PROFILE_FIELDS} }} }} }}")
        me = data["account"]["me"]
        return profile_from_graphql(me) if me else None

    async def add_analysis_to_history(
        self,
        results: Sequence[AnalysisResultItem],
        allergies: str,
        preferences: str,
        input_text: str,
    ) -> UserProfile:
        data = await self.graphql(
            "mutation($results: [AnalysisResultItemInput!]!, $allergies: String!, "
            "$preferences: String!, $inputText: String!) { account { "
            "addAnalysisToHistory(results: $results, allergies: $allergies, "
            "preferences: $preferences, inputText: $inputText) { "
            f"{PROFILE_FIELDS} }} }} }}",
            {
                "results": [
                    {
                        "itemName": item.item_name,
                        "safetyLevel": item.safety_level.name,
                        "reasoning": item.reasoning,
                        "identifiedAllergens": list(item.identified_allergens),
                    }
                    for item in results
                ],
                "allergies": allergies,
                "preferences": preferences,
                "inputText": input_text,
            },
        )
        return profile_from_graphql(data["account"]["addAnalysisToHistory"])
