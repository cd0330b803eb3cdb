"""Game logger for detailed game replay."""

import json
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel

from clue_engine.models.card import Hypothesis
from clue_engine.models.game_state import GamePhase, Refutation, Solution
from clue_engine.models.player import Player

from .formatters import format_hands, format_hypothesis, format_refutation


class GameLogConfig(BaseModel):
    """Configuration for game logging."""

    enabled: bool = False
    output_path: str = "game_log.jsonl"


class GameLogger:
    """Logger for detailed game events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    Unlike the in-game log, the replay file records the solution, every hand
    and every shown card, so it must never be shown to players mid-game.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        if self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        if self._file:
            self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
            self._file.flush()

    def log_game_start(
        self,
        game_num: int,
        solution: Solution,
        players: list[Player],
    ) -> None:
        """Log game start with the solution and initial hands.

        Args:
            game_num: Game number.
            solution: Hidden solution.
            players: Players with their dealt hands.
        """
        self._write({
            "type": "game_start",
            "game": game_num,
            "solution": format_hypothesis(solution),
            "hands": format_hands(players),
        })

    def log_suggestion(
        self,
        game_num: int,
        turn_num: int,
        player_id: int,
        hypothesis: Hypothesis,
    ) -> None:
        """Log a suggestion.

        Args:
            game_num: Game number.
            turn_num: Turn number.
            player_id: Suggesting player.
            hypothesis: Suggested triple.
        """
        self._write({
            "type": "suggestion",
            "game": game_num,
            "turn": turn_num,
            "player": player_id,
            "hypothesis": format_hypothesis(hypothesis),
        })

    def log_refutation(
        self,
        game_num: int,
        turn_num: int,
        refutation: Refutation,
    ) -> None:
        """Log the outcome of a suggestion.

        Args:
            game_num: Game number.
            turn_num: Turn number.
            refutation: Outcome, including the shown card.
        """
        self._write({
            "type": "refutation",
            "game": game_num,
            "turn": turn_num,
            "player": refutation.suggester_index,
            **format_refutation(refutation),
        })

    def log_accusation(
        self,
        game_num: int,
        turn_num: int,
        player_id: int,
        hypothesis: Hypothesis,
        correct: bool,
    ) -> None:
        """Log an accusation.

        Args:
            game_num: Game number.
            turn_num: Turn number.
            player_id: Accusing player.
            hypothesis: Accused triple.
            correct: Whether it matched the solution.
        """
        self._write({
            "type": "accusation",
            "game": game_num,
            "turn": turn_num,
            "player": player_id,
            "hypothesis": format_hypothesis(hypothesis),
            "correct": correct,
        })

    def log_turn_end(
        self,
        game_num: int,
        turn_num: int,
        next_player: int,
    ) -> None:
        """Log a turn hand-over.

        Args:
            game_num: Game number.
            turn_num: Turn number that just started.
            next_player: Player whose turn it now is.
        """
        self._write({
            "type": "turn_end",
            "game": game_num,
            "turn": turn_num,
            "next_player": next_player,
        })

    def log_game_end(
        self,
        game_num: int,
        phase: GamePhase,
        solution: Solution,
        turns: int,
    ) -> None:
        """Log game end with results.

        Args:
            game_num: Game number.
            phase: Final phase (WON or LOST).
            solution: Hidden solution.
            turns: Turn counter at the end of the game.
        """
        self._write({
            "type": "game_end",
            "game": game_num,
            "result": phase.value,
            "solution": format_hypothesis(solution),
            "turns": turns,
        })

    def log_session_end(
        self,
        total_games: int,
        results: dict[str, int],
    ) -> None:
        """Log session end with final results.

        Args:
            total_games: Total number of games played.
            results: Count of games per final phase.
        """
        self._write({
            "type": "session_end",
            "total_games": total_games,
            "results": results,
        })
