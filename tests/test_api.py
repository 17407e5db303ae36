"""Tests for the relay endpoint and health check."""

from advisor.core.prompt import MARKET_CONTEXT_SUFFIX
from config.settings import Settings, get_settings
from app.main import app


GENERIC_FAILURE = "Error processing your request. Please try again."


class TestRelayEndpoint:
    """POST /api/gemini"""

    def test_returns_model_text(self, client, fake_model):
        response = client.post("/api/gemini", json={"prompt": "What are rental trends in Austin?"})

        assert response.status_code == 200
        assert response.json() == {"text": fake_model.reply}

    def test_sends_enriched_prompt_to_model(self, client, fake_model):
        client.post("/api/gemini", json={"prompt": "What are rental trends in Austin?"})

        assert fake_model.prompts == ["What are rental trends in Austin?" + MARKET_CONTEXT_SUFFIX]
        assert "real estate market trends" in fake_model.prompts[0]

    def test_each_call_is_independent(self, client, fake_model):
        client.post("/api/gemini", json={"prompt": "first"})
        client.post("/api/gemini", json={"prompt": "second"})

        assert fake_model.prompts[1] == "second" + MARKET_CONTEXT_SUFFIX

    def test_missing_prompt(self, client, fake_model):
        response = client.post("/api/gemini", json={})

        assert response.status_code == 400
        assert response.json() == {"text": "Invalid prompt"}
        assert fake_model.prompts == []

    def test_non_string_prompt(self, client):
        response = client.post("/api/gemini", json={"prompt": 42})

        assert response.status_code == 400
        assert response.json() == {"text": "Invalid prompt"}

    def test_empty_prompt(self, client):
        response = client.post("/api/gemini", json={"prompt": ""})

        assert response.status_code == 400

    def test_malformed_body(self, client):
        response = client.post(
            "/api/gemini",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"text": "Invalid prompt"}

    def test_missing_api_key(self, client, fake_model, factory_calls):
        app.dependency_overrides[get_settings] = lambda: Settings(gemini_api_key=None)

        response = client.post("/api/gemini", json={"prompt": "Is now a good time to buy?"})

        assert response.status_code == 500
        assert response.json() == {"text": "API key not configured"}
        assert factory_calls == []
        assert fake_model.prompts == []

    def test_missing_api_key_checked_before_prompt(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(gemini_api_key="")

        response = client.post("/api/gemini", json={})

        assert response.status_code == 500
        assert response.json() == {"text": "API key not configured"}

    def test_downstream_failure_is_hidden(self, client, fake_model):
        fake_model.error = RuntimeError("quota exceeded for project 1234")

        response = client.post("/api/gemini", json={"prompt": "Compare London and Dubai prices"})

        assert response.status_code == 500
        assert response.json() == {"text": GENERIC_FAILURE}
        assert "quota exceeded" not in response.text
        assert len(fake_model.prompts) == 1


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_run_serves_app_with_uvicorn(monkeypatch):
    import app.main as main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    main.run()

    assert calls == [(("app.main:app",), {"host": main.settings.host, "port": main.settings.port})]
