"""Unit tests for the account GraphQL API (full app, in-memory stores)."""

import pytest
from fastapi.testclient import TestClient

from menu_guard.app import app

PROFILE_SELECTION = """
  id email username allergies preferences isPro maxAnalysesPerMonth analysesRemaining
  analysisHistory { id inputText allergies result { itemName safetyLevel identifiedAllergens } }
"""

ADD_ANALYSIS = """
mutation Add($results: [AnalysisResultItemInput!]!) {
  account {
    addAnalysisToHistory(
      results: $results, allergies: "Peanuts", preferences: "", inputText: "Pasted Text"
    ) { %s }
  }
}
""" % PROFILE_SELECTION

RESULTS = [
    {
        "itemName": "Pad Thai",
        "safetyLevel": "UNSAFE",
        "reasoning": "Contains peanuts.",
        "identifiedAllergens": ["peanuts"],
    },
    {
        "itemName": "Green Salad",
        "safetyLevel": "SAFE",
        "reasoning": "No listed allergens.",
        "identifiedAllergens": [],
    },
]


@pytest.fixture
def client():
    return TestClient(app)


def _gql(client, query, variables=None, token=None):
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    response = client.post(
        "/graphql", json={"query": query, "variables": variables or {}}, headers=headers
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def token(client):
    """Sign up and log in a user, returning the access token."""
    _gql(
        client,
        'mutation { account { signUp(email: "ada@example.com", password: "lovelace-1") } }',
    )
    body = _gql(
        client,
        'mutation { account { logIn(email: "ada@example.com", password: "lovelace-1") '
        "{ accessToken tokenType profile { username } } } }",
    )
    payload = body["data"]["account"]["logIn"]
    assert payload["tokenType"] == "bearer"
    assert payload["profile"]["username"] == "ada"
    return payload["accessToken"]


class TestAccountQueries:
    def test_me_is_null_for_guests(self, client):
        body = _gql(client, "query { account { me { id } } }")
        assert body["data"]["account"]["me"] is None

    def test_me_returns_default_profile(self, client, token):
        body = _gql(client, "query { account { me { %s } } }" % PROFILE_SELECTION, token=token)

        me = body["data"]["account"]["me"]
        assert me["email"] == "ada@example.com"
        assert me["allergies"] == "Peanuts, Shellfish, Gluten"
        assert me["isPro"] is False
        assert me["maxAnalysesPerMonth"] == 5
        assert me["analysesRemaining"] == 5
        assert me["analysisHistory"] == []

    def test_invalid_token_rejected(self, client):
        response = client.post(
            "/graphql",
            json={"query": "query { account { me { id } } }"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401


class TestAccountMutations:
    def test_add_analysis_to_history(self, client, token):
        body = _gql(client, ADD_ANALYSIS, {"results": RESULTS}, token=token)

        profile = body["data"]["account"]["addAnalysisToHistory"]
        assert profile["analysesRemaining"] == 4
        entry = profile["analysisHistory"][0]
        assert entry["inputText"] == "Pasted Text"
        assert entry["result"][0] == {
            "itemName": "Pad Thai",
            "safetyLevel": "UNSAFE",
            "identifiedAllergens": ["peanuts"],
        }

    def test_quota_exceeded_is_graphql_error(self, client, token):
        for _ in range(5):
            _gql(client, ADD_ANALYSIS, {"results": RESULTS}, token=token)

        body = _gql(client, ADD_ANALYSIS, {"results": RESULTS}, token=token)

        assert body["data"] is None
        assert "monthly analysis limit of 5" in body["errors"][0]["message"]

    def test_add_analysis_requires_login(self, client):
        body = _gql(client, ADD_ANALYSIS, {"results": RESULTS})
        assert body["errors"][0]["message"] == "User not authenticated."

    def test_delete_analysis(self, client, token):
        added = _gql(client, ADD_ANALYSIS, {"results": RESULTS}, token=token)
        history_id = added["data"]["account"]["addAnalysisToHistory"]["analysisHistory"][0]["id"]

        body = _gql(
            client,
            "mutation { account { deleteAnalysisFromHistory(historyId: %d) "
            "{ analysisHistory { id } } } }" % history_id,
            token=token,
        )

        assert body["data"]["account"]["deleteAnalysisFromHistory"]["analysisHistory"] == []

    def test_update_profile_and_upgrade(self, client, token):
        body = _gql(
            client,
            'mutation { account { updateProfile(allergies: "Sesame", preferences: "Vegan") '
            "{ allergies preferences } } }",
            token=token,
        )
        assert body["data"]["account"]["updateProfile"] == {
            "allergies": "Sesame",
            "preferences": "Vegan",
        }

        body = _gql(
            client,
            "mutation { account { initiateProUpgrade { checkoutUrl } } }",
            token=token,
        )
        assert body["data"]["account"]["initiateProUpgrade"]["checkoutUrl"].startswith(
            "https://checkout.stripe.com/pay/cs_test_"
        )

        body = _gql(
            client,
            "mutation { account { upgradeToPro { isPro maxAnalysesPerMonth analysesRemaining } } }",
            token=token,
        )
        assert body["data"]["account"]["upgradeToPro"] == {
            "isPro": True,
            "maxAnalysesPerMonth": None,
            "analysesRemaining": None,
        }

    def test_log_out_revokes_token(self, client, token):
        body = _gql(client, "mutation { account { logOut } }", token=token)
        assert body["data"]["account"]["logOut"] is True

        response = client.post(
            "/graphql",
            json={"query": "query { account { me { id } } }"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401

    def test_duplicate_sign_up(self, client, token):
        body = _gql(
            client,
            'mutation { account { signUp(email: "ada@example.com", password: "x") } }',
        )
        assert body["errors"][0]["message"] == "User already registered"
