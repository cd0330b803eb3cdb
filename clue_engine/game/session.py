"""Event-loop driven game session.

Paces computer turns with a cancellable delay and runs narrative requests
off the loop with a timeout. Closing the session cancels the pending turn
timer, abandons narrative calls still running and drops any result that
arrives afterwards.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from clue_engine.errors import ExternalServiceError
from clue_engine.models.game_state import GamePhase, LogKind
from clue_engine.narrative import (
    FALLBACK_CONCLUSION_ERROR_LOST,
    FALLBACK_CONCLUSION_ERROR_WON,
    FALLBACK_HINT_ERROR,
    FALLBACK_INTRO,
    NarrativeService,
)

from .engine import ActionResult, GameEngine

logger = logging.getLogger(__name__)

HINT_PREFIX = "Assistant IA : "


class GameSession:
    """Runs one GameEngine on an asyncio event loop.

    All engine calls happen on the loop thread, one at a time.
    """

    def __init__(
        self,
        engine: GameEngine,
        narrative: NarrativeService | None = None,
        computer_turn_delay: float | None = None,
        narrative_timeout: float | None = None,
    ):
        """Initialize session.

        Args:
            engine: Engine to drive
            narrative: Flavor text source (fallback-only service if None)
            computer_turn_delay: Pause before a computer plays (seconds)
            narrative_timeout: Max wait for a narrative call (seconds)
        """
        timing = engine.config.timing
        self.engine = engine
        self.narrative = narrative or NarrativeService()
        self.computer_turn_delay = (
            timing.computer_turn_delay if computer_turn_delay is None else computer_turn_delay
        )
        self.narrative_timeout = (
            timing.narrative_timeout if narrative_timeout is None else narrative_timeout
        )

        self.flavor_text = ""
        self._timer: asyncio.TimerHandle | None = None
        self._closed = False
        # Own pool so a hung backend call never delays loop shutdown
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="narrative")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_pending_turn(self) -> bool:
        return self._timer is not None

    def start(self, num_players: int | None = None) -> None:
        """Deal a new game, dropping anything scheduled for the previous one."""
        self._ensure_open()
        self.cancel_pending_turn()
        self.engine.start(num_players)
        self.schedule_computer_turn()

    def close(self) -> None:
        """Stop the session. Pending turns and narrative results are discarded."""
        self._closed = True
        self.cancel_pending_turn()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # --- Computer turns ---

    def schedule_computer_turn(self) -> bool:
        """Schedule the current computer player's turn after the delay.

        Must be called from a running event loop. Replaces any turn already
        scheduled.

        Returns:
            True if a turn was scheduled
        """
        if self._closed:
            return False
        state = self.engine.state
        player = state.current_player
        if (
            state.phase != GamePhase.PLAYING
            or state.pending_refutation is not None
            or player is None
            or not player.is_computer
        ):
            return False

        self.cancel_pending_turn()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(
            self.computer_turn_delay,
            self._run_computer_turn,
            state.game_number,
        )
        logger.debug(f"{player.name} will play in {self.computer_turn_delay}s")
        return True

    def cancel_pending_turn(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _run_computer_turn(self, game_number: int) -> None:
        self._timer = None
        if self._closed or self.engine.state.game_number != game_number:
            logger.debug("Ignoring computer turn scheduled for a stale game")
            return

        result = self.engine.play_computer_turn()
        if result and result.pending is None:
            self.schedule_computer_turn()

    # --- Human actions that hand the turn on ---

    def end_human_turn(self) -> ActionResult:
        """Acknowledge the suggestion result and pass the turn."""
        result = self.engine.end_turn()
        if result:
            self.schedule_computer_turn()
        return result

    def respond_to_refutation(self, card_id: str) -> ActionResult:
        """Show a card to the computer waiting on the human."""
        result = self.engine.respond_to_refutation(card_id)
        if result:
            self.schedule_computer_turn()
        return result

    # --- Narrative ---

    async def request_intro(self) -> str:
        """Fetch the case intro and keep it as flavor text."""
        solution = self.engine.state.solution
        game_number = self.engine.state.game_number
        text = await self._call_narrative(FALLBACK_INTRO, self.narrative.intro_text, solution)
        if self._is_current(game_number):
            self.flavor_text = text
        return text

    async def request_hint(self) -> str:
        """Fetch a hint for the human and append it to the game log."""
        human = self.engine.human
        game_number = self.engine.state.game_number
        text = await self._call_narrative(
            FALLBACK_HINT_ERROR,
            self.narrative.hint_text,
            list(human.hand) if human else [],
            self.engine.cleared_cards(),
            self.engine.last_log_message(),
        )
        if self._is_current(game_number):
            self.engine.append_log(f"{HINT_PREFIX}{text}", LogKind.INFO)
        return text

    async def request_conclusion(self) -> str:
        """Fetch the outro once the game is over."""
        state = self.engine.state
        won = state.phase == GamePhase.WON
        game_number = state.game_number
        fallback = FALLBACK_CONCLUSION_ERROR_WON if won else FALLBACK_CONCLUSION_ERROR_LOST
        text = await self._call_narrative(
            fallback, self.narrative.conclusion_text, won, state.solution
        )
        if self._is_current(game_number):
            self.flavor_text = text
        return text

    async def _call_narrative(
        self,
        fallback: str,
        func: Callable[..., str],
        *args: Any,
    ) -> str:
        """Run a blocking narrative call in a worker thread with a timeout.

        Never raises: any failure is logged and replaced by the fallback.
        """
        if self._closed:
            return fallback

        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(self._executor, func, *args),
                timeout=self.narrative_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Narrative call timed out after {self.narrative_timeout}s")
        except ExternalServiceError as e:
            logger.warning(f"Narrative call failed: {e}")
        except Exception:
            logger.exception("Unexpected narrative error")
        return fallback

    def _is_current(self, game_number: int) -> bool:
        return not self._closed and self.engine.state.game_number == game_number

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Session is closed")
