"""Tests for the narrative service."""

from types import SimpleNamespace

import pytest

from clue_engine.config import NarrativeConfig
from clue_engine.models.game_state import Solution
from clue_engine.narrative import service as service_module
from clue_engine.narrative import (
    FALLBACK_CONCLUSION_ERROR_LOST,
    FALLBACK_CONCLUSION_ERROR_WON,
    FALLBACK_CONCLUSION_LOST,
    FALLBACK_CONCLUSION_WON,
    FALLBACK_HINT,
    FALLBACK_HINT_ERROR,
    FALLBACK_INTRO,
    NarrativeService,
)


class FakeModels:
    """Stands in for client.models, recording prompts."""

    def __init__(self, text="Texte.", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate_content(self, model, contents):
        self.prompts.append(contents)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def service_with(models):
    return NarrativeService(client=SimpleNamespace(models=models))


@pytest.fixture
def solution(catalog):
    return Solution(
        suspect=catalog.get("s1"),
        location=catalog.get("l2"),
        weapon=catalog.get("w3"),
    )


class TestWithoutBackend:
    """Tests for the fallback-only service."""

    def test_not_available(self):
        """Test that no key means no backend."""
        assert not NarrativeService().available

    def test_fallbacks(self, solution):
        """Test the canned texts."""
        service = NarrativeService()

        assert service.intro_text(solution) == FALLBACK_INTRO
        assert service.hint_text([], [], "Jeu commencé") == FALLBACK_HINT
        assert service.conclusion_text(True, solution) == FALLBACK_CONCLUSION_WON
        assert service.conclusion_text(False, solution) == FALLBACK_CONCLUSION_LOST

    def test_from_config_without_key(self, monkeypatch):
        """Test that a missing environment variable disables the backend."""
        monkeypatch.delenv("CLUE_TEST_KEY", raising=False)
        config = NarrativeConfig(api_key_env="CLUE_TEST_KEY")
        assert not NarrativeService.from_config(config).available

    def test_from_config_disabled(self, monkeypatch):
        """Test that a disabled section ignores the key."""
        monkeypatch.setenv("CLUE_TEST_KEY", "secret")
        config = NarrativeConfig(enabled=False, api_key_env="CLUE_TEST_KEY")
        assert not NarrativeService.from_config(config).available


class TestWithBackend:
    """Tests with a fake model client."""

    def test_intro_hides_suspect(self, solution):
        """Test that the intro prompt never names the suspect."""
        models = FakeModels("Une ombre passe.")
        text = service_with(models).intro_text(solution)

        assert text == "Une ombre passe."
        prompt = models.prompts[0]
        assert solution.weapon.name in prompt
        assert solution.location.name in prompt
        assert solution.suspect.name not in prompt

    def test_hint_prompt(self, catalog):
        """Test that the hint prompt carries what the player knows."""
        models = FakeModels("Cherchez l'arme.")
        text = service_with(models).hint_text(
            [catalog.get("s2")], [catalog.get("w1")], "Rival 1 a montré une carte."
        )

        assert text == "Cherchez l'arme."
        prompt = models.prompts[0]
        assert catalog.get("s2").name in prompt
        assert catalog.get("w1").name in prompt
        assert "Rival 1 a montré une carte." in prompt

    def test_conclusion_names_solution(self, solution):
        """Test that the outro prompt reveals the full solution."""
        models = FakeModels("Fin.")
        service_with(models).conclusion_text(True, solution)

        for card in solution.cards():
            assert card.name in models.prompts[0]

    def test_text_is_stripped(self, solution):
        """Test that surrounding whitespace is removed."""
        assert service_with(FakeModels("  Nuit.\n")).intro_text(solution) == "Nuit."

    def test_backend_error(self, solution):
        """Test the error fallbacks when the call fails."""
        service = service_with(FakeModels(error=RuntimeError("quota")))

        assert service.intro_text(solution) == FALLBACK_INTRO
        assert service.hint_text([], [], "") == FALLBACK_HINT_ERROR
        assert service.conclusion_text(True, solution) == FALLBACK_CONCLUSION_ERROR_WON
        assert service.conclusion_text(False, solution) == FALLBACK_CONCLUSION_ERROR_LOST

    def test_empty_response(self, solution):
        """Test that an empty answer counts as a failure."""
        service = service_with(FakeModels(text=""))
        assert service.hint_text([], [], "") == FALLBACK_HINT_ERROR


class TestClientConstruction:
    """Tests for building the Gemini client."""

    def test_timeout_passed_to_client(self, monkeypatch):
        """Test that the request timeout reaches the HTTP options in ms."""
        built = {}

        def fake_client(**kwargs):
            built.update(kwargs)
            return SimpleNamespace(models=FakeModels())

        monkeypatch.setattr(service_module.genai, "Client", fake_client)
        monkeypatch.setenv("CLUE_TEST_KEY", "secret")

        service = NarrativeService.from_config(
            NarrativeConfig(api_key_env="CLUE_TEST_KEY"), timeout=2.5
        )

        assert service.available
        assert built["api_key"] == "secret"
        assert built["http_options"].timeout == 2500

    def test_unreadable_text(self, solution):
        """Test that an error reading the response counts as a failure."""

        class Unreadable:
            @property
            def text(self):
                raise ValueError("no text parts")

        models = SimpleNamespace(generate_content=lambda model, contents: Unreadable())
        service = NarrativeService(client=SimpleNamespace(models=models))

        assert service.intro_text(solution) == FALLBACK_INTRO
        assert service.conclusion_text(False, solution) == FALLBACK_CONCLUSION_ERROR_LOST
