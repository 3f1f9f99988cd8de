"""Tests for the HTTP API."""

import json

from fastapi.testclient import TestClient

from mama_chef.api.app import create_app
from mama_chef.containers import AppContainer
from mama_chef.domain.errors import ConfigError, NetworkError, UpstreamError
from tests.conftest import BANANA_PAYLOAD, PNG_DATA_URL, FakeModelClient


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _new_session(client: TestClient) -> str:
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.json() == {"status": "ok"}


def test_proxy_returns_text(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append("Ответ модели")

    response = _client(container).post(
        "/api/gemini",
        json={
            "model": "gemini-2.5-flash",
            "contents": [{"role": "user", "parts": [{"text": "Привет"}]}],
            "systemInstruction": "Ты Мама-Шеф",
            "temperature": 0.7,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"text": "Ответ модели"}
    request = model_client.requests[0]
    assert request.system_instruction == "Ты Мама-Шеф"
    assert request.response_schema is None


def test_proxy_reports_missing_key(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append(ConfigError("GEMINI_API_KEY is missing"))

    response = _client(container).post(
        "/api/gemini", json={"model": "m", "contents": []}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "GEMINI_API_KEY is missing"}


def test_proxy_reports_upstream_details(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append(UpstreamError(400, "bad request body"))

    response = _client(container).post(
        "/api/gemini", json={"model": "m", "contents": []}
    )

    assert response.status_code == 500
    assert response.json() == {
        "error": "Gemini API error",
        "details": "bad request body",
    }


def test_proxy_reports_network_failure(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append(NetworkError("connection reset"))

    response = _client(container).post(
        "/api/gemini", json={"model": "m", "contents": []}
    )

    assert response.status_code == 502
    assert response.json()["details"] == "connection reset"


def test_chat_round_trip(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append("Оформите Pro [NEEDS_SUBSCRIPTION]")
    client = _client(container)
    session_id = _new_session(client)

    response = client.post(
        f"/sessions/{session_id}/messages", json={"text": "Меню на неделю"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["text"] == "Оформите Pro"
    assert body["needs_subscription"] is True
    turns = client.get(f"/sessions/{session_id}/turns").json()
    assert [turn["role"] for turn in turns] == ["assistant", "user", "assistant"]


def test_chat_message_with_image_is_echoed(container: AppContainer) -> None:
    client = _client(container)
    session_id = _new_session(client)

    client.post(
        f"/sessions/{session_id}/messages", json={"text": "", "image": PNG_DATA_URL}
    )

    turns = client.get(f"/sessions/{session_id}/turns").json()
    assert turns[1]["image"] == PNG_DATA_URL


def test_chat_rejects_bad_input(container: AppContainer) -> None:
    client = _client(container)
    session_id = _new_session(client)

    empty = client.post(f"/sessions/{session_id}/messages", json={"text": " "})
    bad_image = client.post(
        f"/sessions/{session_id}/messages", json={"text": "x", "image": "nope"}
    )

    assert empty.status_code == 422
    assert empty.json()["error"] == "E_EMPTY_MESSAGE"
    assert bad_image.status_code == 422
    assert bad_image.json()["error"] == "E_INVALID_IMAGE"


def test_unknown_session_is_404(container: AppContainer) -> None:
    response = _client(container).get(
        "/sessions/00000000-0000-0000-0000-000000000000/turns"
    )

    assert response.status_code == 404
    assert response.json()["error"] == "E_UNKNOWN_SESSION"


def test_profile_update_and_subscription(container: AppContainer) -> None:
    client = _client(container)
    session_id = _new_session(client)

    updated = client.patch(
        f"/sessions/{session_id}/profile",
        json={"age_bracket": "2-3", "subscription": "expired"},
    ).json()
    reply = client.post(f"/sessions/{session_id}/subscription").json()
    profile = client.get(f"/sessions/{session_id}/profile").json()

    assert updated == {
        "age_bracket": "2-3",
        "is_sick": False,
        "subscription": "expired",
    }
    assert "PRO" in reply["text"]
    assert profile["subscription"] == "active"


def test_quick_action_endpoint(container: AppContainer) -> None:
    client = _client(container)
    session_id = _new_session(client)

    ok = client.post(f"/sessions/{session_id}/quick-actions/scan_fridge")
    missing = client.post(f"/sessions/{session_id}/quick-actions/dance")

    assert ok.status_code == 200
    assert missing.status_code == 404


def test_tracker_flow(container: AppContainer, model_client: FakeModelClient) -> None:
    payload = {
        "items": [
            *BANANA_PAYLOAD["items"],
            {
                "name": "печенье",
                "portionGrams": 30,
                "kcalPer100g": 450,
                "proteinPer100g": 6,
                "fatPer100g": 18,
                "carbsPer100g": 65,
                "confidence": "medium",
            },
        ]
    }
    model_client.replies.append(json.dumps(payload))
    client = _client(container)
    session_id = _new_session(client)
    base = f"/sessions/{session_id}/tracker"

    batch = client.post(f"{base}/analyze", json={"image": PNG_DATA_URL}).json()
    cookie_id = batch["items"][1]["id"]
    banana_id = batch["items"][0]["id"]
    client.patch(f"{base}/items/{cookie_id}", json={"included": False})
    edited = client.patch(f"{base}/items/{banana_id}", json={"portion_grams": 200})
    meal = client.post(f"{base}/commit", json={})
    meals = client.get(f"{base}/meals").json()
    summary = client.get(f"{base}/summary").json()

    assert edited.json()["totals"]["kcal"] == 180
    assert meal.status_code == 201
    assert [item["name"] for item in meal.json()["items"]] == ["банан"]
    assert meals[0]["id"] == meal.json()["id"]
    assert summary["today"]["kcal"] == 180
    assert summary["batch"]["kcal"] == 0
    assert [entry["label"] for entry in summary["energy"]] == [
        "protein",
        "fat",
        "carbs",
    ]


def test_tracker_errors_are_distinct(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append(json.dumps({"items": [{"name": "x"}]}))
    model_client.replies.append(UpstreamError(503, "overloaded"))
    client = _client(container)
    session_id = _new_session(client)
    base = f"/sessions/{session_id}/tracker"

    malformed = client.post(f"{base}/analyze", json={"image": PNG_DATA_URL})
    upstream = client.post(f"{base}/analyze", json={"image": PNG_DATA_URL})
    empty = client.post(f"{base}/commit", json={})

    assert malformed.status_code == 422
    assert malformed.json()["error"] == "E_MALFORMED_PAYLOAD"
    assert upstream.status_code == 502
    assert upstream.json() == {"error": "E_UPSTREAM", "details": "overloaded"}
    assert empty.status_code == 409
    assert empty.json()["error"] == "E_EMPTY_SELECTION"


def test_low_confidence_commit_needs_confirmation(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    payload = {"items": [dict(BANANA_PAYLOAD["items"][0], confidence=0.3)]}
    model_client.replies.append(json.dumps(payload))
    client = _client(container)
    session_id = _new_session(client)
    base = f"/sessions/{session_id}/tracker"
    client.post(f"{base}/analyze", json={"image": PNG_DATA_URL})

    refused = client.post(f"{base}/commit", json={})
    accepted = client.post(f"{base}/commit", json={"confirm_low_confidence": True})

    assert refused.status_code == 409
    assert accepted.status_code == 201


def test_delete_meal_is_idempotent(container: AppContainer) -> None:
    client = _client(container)
    session_id = _new_session(client)

    response = client.delete(f"/sessions/{session_id}/tracker/meals/nonexistent-id")

    assert response.status_code == 204
    assert client.get(f"/sessions/{session_id}/tracker/meals").json() == []


def test_tracker_profile_and_bad_timezone(container: AppContainer) -> None:
    client = _client(container)
    session_id = _new_session(client)
    base = f"/sessions/{session_id}/tracker"

    profile = client.put(
        f"{base}/profile",
        json={
            "name": "Аня",
            "age": 3,
            "targets": {"kcal": 1200, "protein_g": 35, "fat_g": 40, "carbs_g": 140},
        },
    )
    summary = client.get(f"{base}/summary", params={"tz": "Europe/Moscow"})
    bad = client.get(f"{base}/summary", params={"tz": "Mars/Olympus"})

    assert profile.json()["targets"]["kcal"] == 1200
    assert summary.json()["progress"][0]["target"] == 1200
    assert bad.status_code == 422
    assert bad.json() == {
        "error": "E_INVALID_TIMEZONE",
        "details": "Unknown timezone: Mars/Olympus",
    }


def test_proxy_rejects_invalid_body_with_error_shape(container: AppContainer) -> None:
    response = _client(container).post("/api/gemini", json={"contents": []})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "E_INVALID_REQUEST"
    assert "body.model" in body["details"]


def test_sessions_do_not_see_each_others_meals(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append(json.dumps(BANANA_PAYLOAD))
    client = _client(container)
    first = f"/sessions/{_new_session(client)}/tracker"
    second = f"/sessions/{_new_session(client)}/tracker"
    client.post(f"{first}/analyze", json={"image": PNG_DATA_URL})
    meal_id = client.post(f"{first}/commit", json={}).json()["id"]

    deleted = client.delete(f"{second}/meals/{meal_id}")

    assert deleted.status_code == 204
    assert client.get(f"{second}/meals").json() == []
    assert [meal["id"] for meal in client.get(f"{first}/meals").json()] == [meal_id]


def test_client_key_reopens_meal_history(
    container: AppContainer, model_client: FakeModelClient
) -> None:
    model_client.replies.append(json.dumps(BANANA_PAYLOAD))
    client = _client(container)
    created = client.post("/sessions", json={"client_key": "browser-1"})
    base = f"/sessions/{created.json()['session_id']}/tracker"
    client.post(f"{base}/analyze", json={"image": PNG_DATA_URL})
    meal_id = client.post(f"{base}/commit", json={}).json()["id"]

    reopened = client.post("/sessions", json={"client_key": "browser-1"})
    meals = client.get(f"/sessions/{reopened.json()['session_id']}/tracker/meals")
    bad_key = client.post("/sessions", json={"client_key": "../other"})

    assert [meal["id"] for meal in meals.json()] == [meal_id]
    assert bad_key.status_code == 422
    assert bad_key.json()["error"] == "E_INVALID_REQUEST"


def test_error_body_is_documented(container: AppContainer) -> None:
    schema = _client(container).get("/openapi.json").json()

    responses = schema["paths"]["/api/gemini"]["post"]["responses"]
    assert responses["502"]["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/ErrorBody"
    }
