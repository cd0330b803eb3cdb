"""Player notebook: private deduction notes over the catalog."""

from enum import Enum


class NoteStatus(str, Enum):
    """Mark a player puts next to a card."""

    UNKNOWN = "unknown"
    SUSPICIOUS = "suspicious"
    CLEARED = "cleared"
    HAS = "has"


# Toggle cycle
STATUS_CYCLE = [
    NoteStatus.UNKNOWN,
    NoteStatus.SUSPICIOUS,
    NoteStatus.CLEARED,
    NoteStatus.HAS,
]


class Notebook:
    """Card id -> NoteStatus ledger.

    Purely advisory: nothing in the engine reads it back to decide the
    outcome of a suggestion or accusation.
    """

    def __init__(self, entries: dict[str, NoteStatus] | None = None):
        self._entries: dict[str, NoteStatus] = dict(entries or {})

    def status(self, card_id: str) -> NoteStatus:
        """Get the mark for a card (unknown if never touched)."""
        return self._entries.get(card_id, NoteStatus.UNKNOWN)

    def toggle(self, card_id: str) -> NoteStatus:
        """Advance a card to the next mark in the cycle.

        Returns:
            The new status
        """
        current = STATUS_CYCLE.index(self.status(card_id))
        new_status = STATUS_CYCLE[(current + 1) % len(STATUS_CYCLE)]
        self._entries[card_id] = new_status
        return new_status

    def auto_clear(self, card_id: str) -> None:
        """Mark a card cleared (it was shown during a refutation)."""
        self._entries[card_id] = NoteStatus.CLEARED

    def reset(self) -> None:
        self._entries.clear()

    def entries(self) -> dict[str, NoteStatus]:
        """Get a copy of all explicit marks."""
        return dict(self._entries)

    def cleared_ids(self) -> set[str]:
        """Get ids the player has ruled out (cleared or held)."""
        return {
            card_id
            for card_id, status in self._entries.items()
            if status in (NoteStatus.CLEARED, NoteStatus.HAS)
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Notebook({self._entries!r})"
