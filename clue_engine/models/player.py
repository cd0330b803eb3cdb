"""Player model."""

from pydantic import BaseModel, Field

from .card import Card


class Player(BaseModel):
    """Seat at the table.

    Hands are fixed once dealt: cards are only ever shown, never removed.
    """

    player_id: int  # Seat index, 0 is the human by convention
    name: str = "Player"
    is_computer: bool = False
    hand: list[Card] = Field(default_factory=list)

    def __str__(self) -> str:
        kind = "CPU" if self.is_computer else "human"
        return f"Player{self.player_id}[{self.name}] ({kind})"

    def __repr__(self) -> str:
        return (
            f"Player(id={self.player_id}, name={self.name!r}, "
            f"computer={self.is_computer}, cards={len(self.hand)})"
        )
