"""Flavor text from a Gemini model, with fixed fallbacks.

Nothing here is on the critical path of a turn: every method returns a
string, falling back to canned text when no API key is configured or the
backend fails.
"""

import logging
import os
from typing import Any, Sequence

from google import genai
from google.genai import types

from clue_engine.config import NarrativeConfig
from clue_engine.errors import ExternalServiceError
from clue_engine.models.card import Card
from clue_engine.models.game_state import Solution

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

FALLBACK_INTRO = "Une nuit sombre, un cri silencieux. L'enquête commence maintenant."
FALLBACK_HINT = "Consultez attentivement votre carnet."
FALLBACK_HINT_ERROR = "Relisez vos indices, détective."
FALLBACK_CONCLUSION_WON = "Affaire classée ! Vous avez trouvé la vérité !"
FALLBACK_CONCLUSION_LOST = "Le coupable s'est échappé..."
FALLBACK_CONCLUSION_ERROR_WON = "Excellente déduction ! La vérité triomphe."
FALLBACK_CONCLUSION_ERROR_LOST = "Le mystère reste entier."


def _names(cards: Sequence[Card]) -> str:
    return ", ".join(c.name for c in cards)


class NarrativeService:
    """Generates intro, hint and conclusion text for a game."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        language: str = "French",
        client: Any = None,
        timeout: float | None = None,
    ):
        """Initialize narrative service.

        Args:
            api_key: Gemini API key. Without it (and without a client) only
                fallback text is produced.
            model: Model name
            language: Language the text is written in
            client: Pre-built client exposing models.generate_content()
            timeout: Per-request HTTP timeout (seconds) for the built client
        """
        self.model = model
        self.language = language
        if client is None and api_key:
            http_options = None
            if timeout is not None:
                http_options = types.HttpOptions(timeout=int(timeout * 1000))
            client = genai.Client(api_key=api_key, http_options=http_options)
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: NarrativeConfig,
        timeout: float | None = None,
    ) -> "NarrativeService":
        """Create a service, reading the API key from the environment."""
        api_key = os.getenv(config.api_key_env) if config.enabled else None
        return cls(
            api_key=api_key,
            model=config.model,
            language=config.language,
            timeout=timeout,
        )

    @property
    def available(self) -> bool:
        """Check if a backend is configured."""
        return self._client is not None

    def _generate(self, prompt: str) -> str:
        """Send a prompt to the model.

        Raises:
            ExternalServiceError: If the call fails or returns no text
        """
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=prompt,
            )
            text = (response.text or "").strip()
        except Exception as e:
            raise ExternalServiceError(f"Narrative backend failed: {e}") from e

        if not text:
            raise ExternalServiceError("Narrative backend returned no text")
        return text

    def intro_text(self, solution: Solution) -> str:
        """Atmospheric case intro. Never names the suspect."""
        if not self.available:
            return FALLBACK_INTRO

        prompt = (
            f"Write a very short, cryptic, noir-style introduction in {self.language} "
            f"(max 2 sentences) for a detective case involving a {solution.weapon.name} "
            f"found at the {solution.location.name}. Do not reveal the suspect. "
            "Keep it atmospheric."
        )
        try:
            return self._generate(prompt)
        except ExternalServiceError as e:
            logger.warning(f"Intro text unavailable: {e}")
            return FALLBACK_INTRO

    def hint_text(
        self,
        hand: Sequence[Card],
        cleared_cards: Sequence[Card],
        last_log_message: str,
    ) -> str:
        """One-sentence hint based on what the player knows.

        Args:
            hand: The player's own cards
            cleared_cards: Cards the player has ruled out
            last_log_message: Most recent game log line
        """
        if not self.available:
            return FALLBACK_HINT

        prompt = (
            "You are a veteran detective assistant in a card game (like Clue). "
            f"Answer in {self.language}.\n"
            f"The player holds: {_names(hand)}.\n"
            f"The player knows these cards are innocent (cleared): {_names(cleared_cards)}.\n"
            f"The last event was: {last_log_message}.\n"
            "Give a short, helpful, but slightly cryptic hint about what they should "
            "do next (e.g. which category they have not checked enough). Max 1 sentence."
        )
        try:
            return self._generate(prompt)
        except ExternalServiceError as e:
            logger.warning(f"Hint text unavailable: {e}")
            return FALLBACK_HINT_ERROR

    def conclusion_text(self, won: bool, solution: Solution) -> str:
        """Two-sentence outro revealing the solution."""
        if not self.available:
            return FALLBACK_CONCLUSION_WON if won else FALLBACK_CONCLUSION_LOST

        culprit = (
            f"{solution.suspect.name} at {solution.location.name} "
            f"with a {solution.weapon.name}"
        )
        if won:
            prompt = (
                f"Write a triumphant, 2-sentence noir outro in {self.language} for "
                f"solving the case. The culprit was {culprit}."
            )
        else:
            prompt = (
                f"Write a gloomy, 2-sentence noir outro in {self.language} for failing "
                f"to solve the case. The real culprit was {culprit}."
            )
        try:
            return self._generate(prompt)
        except ExternalServiceError as e:
            logger.warning(f"Conclusion text unavailable: {e}")
            return FALLBACK_CONCLUSION_ERROR_WON if won else FALLBACK_CONCLUSION_ERROR_LOST
