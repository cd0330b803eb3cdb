"""Action validation for suggestions, accusations and turn ends."""

from dataclasses import dataclass

from clue_engine.models.card import CATEGORY_ORDER, Hypothesis
from clue_engine.models.catalog import CardCatalog
from clue_engine.models.game_state import GamePhase, GameState


@dataclass
class ValidationResult:
    """Result of action validation."""

    is_valid: bool
    error_message: str = ""

    def __bool__(self) -> bool:
        return self.is_valid


VALID = ValidationResult(is_valid=True)


class ActionValidator:
    """Checks that an engine action may be applied to the current state.

    A failed check is local: the engine turns it into a no-op.
    """

    def __init__(self, catalog: CardCatalog):
        """Initialize validator.

        Args:
            catalog: Catalog the game was dealt from
        """
        self.catalog = catalog

    def validate_turn(
        self,
        state: GameState,
        player_index: int | None = None,
    ) -> ValidationResult:
        """Validate that the game is running and it is this player's turn.

        Args:
            state: Current game state
            player_index: Acting seat (None means the current player)

        Returns:
            ValidationResult
        """
        if state.phase != GamePhase.PLAYING:
            return ValidationResult(
                is_valid=False,
                error_message=f"Game is not in progress ({state.phase.value})",
            )

        if player_index is not None and player_index != state.current_player_index:
            return ValidationResult(
                is_valid=False,
                error_message=(
                    f"Not player {player_index}'s turn "
                    f"(current: {state.current_player_index})"
                ),
            )

        if state.pending_refutation is not None:
            return ValidationResult(
                is_valid=False,
                error_message="Waiting for a refutation from the human player",
            )

        return VALID

    def validate_hypothesis(self, hypothesis: Hypothesis | None) -> ValidationResult:
        """Validate that a hypothesis is complete and names catalog cards.

        Args:
            hypothesis: Hypothesis to check

        Returns:
            ValidationResult
        """
        if hypothesis is None or not hypothesis.is_complete:
            return ValidationResult(
                is_valid=False,
                error_message="A suspect, a location and a weapon must all be chosen",
            )

        for category in CATEGORY_ORDER:
            card = hypothesis.slot(category)
            if card.category != category:
                return ValidationResult(
                    is_valid=False,
                    error_message=(
                        f"{card.name} is a {card.category.value}, "
                        f"not a {category.value}"
                    ),
                )
            known = self.catalog.get(card.id)
            if known is None:
                return ValidationResult(
                    is_valid=False,
                    error_message=f"Unknown card: {card.id}",
                )
            if known != card:
                return ValidationResult(
                    is_valid=False,
                    error_message=f"Card {card.id} does not match the catalog entry",
                )

        return VALID

    def validate_action(
        self,
        state: GameState,
        hypothesis: Hypothesis | None,
        player_index: int | None = None,
    ) -> ValidationResult:
        """Validate a suggestion or accusation."""
        result = self.validate_turn(state, player_index)
        if not result:
            return result
        return self.validate_hypothesis(hypothesis)
