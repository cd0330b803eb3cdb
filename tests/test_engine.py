"""Tests for the game engine."""

import random

import pytest

from clue_engine.config import Config
from clue_engine.errors import SetupError
from clue_engine.game.engine import GameEngine
from clue_engine.game.events import CallbackNotifier, EventKind
from clue_engine.game.notebook import NoteStatus
from clue_engine.models.card import CardCategory, Hypothesis
from clue_engine.models.game_state import GamePhase, LogKind

from .conftest import FixedPolicy, make_card, rig, triple


@pytest.fixture
def events():
    return []


@pytest.fixture
def policy():
    return FixedPolicy()


@pytest.fixture
def engine(small_catalog, policy, events):
    """Three-player game with a rigged deal.

    Solution: s3/l3/w3. Human holds s1, Rival 1 holds l1, Rival 2 holds w1 and s2.
    """
    engine = GameEngine(
        small_catalog,
        policy=policy,
        notifier=CallbackNotifier(events.append),
        rng=random.Random(0),
    )
    engine.start(3)
    rig(engine, ("s3", "l3", "w3"), [["s1"], ["l1"], ["w1", "s2"]])
    return engine


def snapshot(engine):
    state = engine.state
    return (
        state.phase,
        state.current_player_index,
        state.turn_count,
        len(state.log),
        state.last_refutation,
        state.pending_refutation,
    )


class TestStart:
    """Tests for GameEngine.start."""

    def test_initial_state(self, small_catalog):
        """Test that a new game is dealt and handed to the human."""
        engine = GameEngine(small_catalog, rng=random.Random(1))
        engine.start(4)

        state = engine.state
        assert state.phase == GamePhase.PLAYING
        assert state.game_number == 1
        assert state.turn_count == 1
        assert state.current_player_index == 0
        assert engine.is_human_turn
        assert [p.is_computer for p in engine.players] == [False, True, True, True]
        assert engine.players[0].name == "Détective (Vous)"
        assert engine.players[2].name == "Rival 2"
        assert state.log[0].message == "Enquête démarrée avec 4 joueurs."
        assert state.log[1].message.startswith("Distribution (6 cartes)")
        assert all(entry.turn == 0 for entry in state.log)

    def test_uses_config_player_count(self, small_catalog):
        """Test the default player count comes from config."""
        config = Config()
        config.game.num_players = 2
        engine = GameEngine(small_catalog, config)
        engine.start()
        assert engine.state.num_players == 2

    def test_restart_resets(self, engine):
        """Test that a new game clears the previous one."""
        engine.notebook.toggle("s1")
        engine.end_turn()

        engine.start(2)

        assert engine.state.game_number == 2
        assert engine.state.turn_count == 1
        assert engine.state.current_player_index == 0
        assert engine.state.last_refutation is None
        assert len(engine.notebook) == 0

    def test_bad_player_count_keeps_state(self, engine):
        """Test that a failed setup leaves the running game untouched."""
        before = snapshot(engine)
        with pytest.raises(SetupError):
            engine.start(5)
        assert snapshot(engine) == before
        assert engine.state.game_number == 1

    def test_catalog_edits_after_start(self, engine, small_catalog):
        """Test that library edits do not reach the dealt game."""
        small_catalog.add(make_card("s9", CardCategory.SUSPECT))
        assert "s9" not in engine.game_catalog

        hypothesis = Hypothesis(
            suspect=small_catalog.get("s9"),
            location=small_catalog.get("l1"),
            weapon=small_catalog.get("w1"),
        )
        result = engine.suggest(hypothesis)
        assert not result
        assert "Unknown card" in result.error_message


class TestSuggest:
    """Tests for GameEngine.suggest."""

    def test_human_suggestion_refuted(self, engine, small_catalog, events):
        """Test the nearest computer shows the human a card."""
        result = engine.suggest(triple(small_catalog, "s1", "l1", "w1"))

        assert result.is_valid
        assert result.refutation.refuted
        assert result.refutation.by_player_index == 1
        assert result.refutation.shown_card.id == "l1"
        assert engine.state.last_refutation == result.refutation
        assert engine.notebook.status("l1") == NoteStatus.CLEARED
        assert engine.state.log[-2].kind == LogKind.DEDUCTION
        assert engine.state.log[-1].message == "Rival 1 a réfuté en montrant : L1"
        assert events == [EventKind.ALERT]

    def test_human_suggestion_not_refuted(self, engine, small_catalog, events):
        """Test the outcome when no opponent can refute."""
        result = engine.suggest(triple(small_catalog, "s3", "l3", "w3"))

        assert result.is_valid
        assert not result.refutation.refuted
        assert not engine.state.last_refutation.refuted
        assert engine.state.log[-1].message == "Personne n'a pu réfuter votre suggestion."
        assert events == [EventKind.SUCCESS]

    def test_suggestion_does_not_end_turn(self, engine, small_catalog):
        """Test the turn stays with the suggester."""
        engine.suggest(triple(small_catalog, "s1", "l1", "w1"))
        assert engine.state.current_player_index == 0
        assert engine.state.turn_count == 1

    def test_incomplete_hypothesis_rejected(self, engine, small_catalog):
        """Test that an incomplete hypothesis changes nothing."""
        before = snapshot(engine)
        result = engine.suggest(Hypothesis(suspect=small_catalog.get("s1")))

        assert not result
        assert result.error_message
        assert snapshot(engine) == before

    def test_wrong_category_rejected(self, engine, small_catalog):
        """Test that a card in the wrong slot is refused."""
        hypothesis = Hypothesis(
            suspect=small_catalog.get("l1"),
            location=small_catalog.get("l2"),
            weapon=small_catalog.get("w1"),
        )
        assert not engine.suggest(hypothesis)

    def test_out_of_turn_rejected(self, engine, small_catalog):
        """Test that another seat cannot act on the human's turn."""
        before = snapshot(engine)
        result = engine.suggest(triple(small_catalog, "s1", "l1", "w1"), player_index=2)

        assert not result
        assert snapshot(engine) == before

    def test_computer_refutes_computer(self, engine, small_catalog):
        """Test that bystanders do not learn the shown card."""
        engine.end_turn()
        result = engine.suggest(triple(small_catalog, "s2", "l3", "w3"))

        assert result.refutation.by_player_index == 2
        assert result.refutation.shown_card.id == "s2"
        assert engine.state.log[-1].message == "Rival 2 a montré une carte à Rival 1."
        assert "S2" not in engine.state.log[-1].message
        assert engine.refutation_for(0).shown_card is None
        assert engine.refutation_for(1).shown_card.id == "s2"
        assert engine.notebook.status("s2") == NoteStatus.UNKNOWN


class TestHumanRefutation:
    """Tests for the two-step refutation by the human."""

    @pytest.fixture
    def pending_engine(self, engine, small_catalog, policy):
        policy.hypothesis = triple(small_catalog, "s1", "l2", "w2")
        engine.end_turn()
        return engine

    def test_computer_waits_for_human(self, pending_engine, events):
        """Test that a computer suggestion the human can refute waits."""
        result = pending_engine.play_computer_turn()

        assert result.is_valid
        assert result.refutation is None
        pending = pending_engine.state.pending_refutation
        assert pending.suggester_index == 1
        assert pending.refuter_index == 0
        assert [c.id for c in pending.matches] == ["s1"]
        assert pending_engine.state.current_player_index == 1
        assert events == [EventKind.ALERT]

    def test_actions_blocked_while_pending(self, pending_engine, small_catalog):
        """Test that nothing else happens until the human answers."""
        pending_engine.play_computer_turn()
        before = snapshot(pending_engine)

        assert not pending_engine.end_turn()
        assert not pending_engine.play_computer_turn()
        assert not pending_engine.accuse(triple(small_catalog, "s3", "l3", "w3"))
        assert snapshot(pending_engine) == before

    def test_respond_with_wrong_card(self, pending_engine):
        """Test that only a matching card can be shown."""
        pending_engine.play_computer_turn()
        before = snapshot(pending_engine)

        result = pending_engine.respond_to_refutation("w1")

        assert not result
        assert snapshot(pending_engine) == before

    def test_respond_ends_computer_turn(self, pending_engine):
        """Test that answering resolves the suggestion and passes the turn."""
        pending_engine.play_computer_turn()
        result = pending_engine.respond_to_refutation("s1")

        assert result.refutation.refuted
        assert result.refutation.by_player_index == 0
        assert result.refutation.shown_card.id == "s1"
        assert pending_engine.state.pending_refutation is None
        assert pending_engine.state.current_player_index == 2
        assert pending_engine.state.turn_count == 3
        assert any(
            entry.message == "Vous avez montré : S1 à Rival 1."
            for entry in pending_engine.state.log
        )

    def test_respond_without_pending(self, engine):
        """Test that there is nothing to answer by default."""
        assert not engine.respond_to_refutation("s1")


class TestAccuse:
    """Tests for GameEngine.accuse."""

    def test_correct_accusation_wins(self, engine, small_catalog, events):
        """Test that the right triple wins the game."""
        phases = []
        engine.set_callbacks(on_game_end=phases.append)

        result = engine.accuse(triple(small_catalog, "s3", "l3", "w3"))

        assert result.phase == GamePhase.WON
        assert engine.state.phase == GamePhase.WON
        assert engine.state.log[-1].message == "CORRECT ! Vous avez résolu le mystère !"
        assert phases == [GamePhase.WON]
        assert events == [EventKind.SUCCESS]

    def test_wrong_accusation_loses(self, engine, small_catalog, events):
        """Test that a single wrong card loses the game."""
        result = engine.accuse(triple(small_catalog, "s3", "l3", "w1"))

        assert result.phase == GamePhase.LOST
        assert engine.state.log[-1].message == "FAUX ! Le coupable s'est échappé..."
        assert events == [EventKind.FAILURE]

    def test_accuse_after_suggestion(self, engine, small_catalog):
        """Test that accusing is allowed after suggesting in the same turn."""
        engine.suggest(triple(small_catalog, "s3", "l3", "w3"))
        assert engine.accuse(triple(small_catalog, "s3", "l3", "w3")).phase == GamePhase.WON

    def test_game_over_is_terminal(self, engine, small_catalog):
        """Test that nothing is accepted after the game ends."""
        engine.accuse(triple(small_catalog, "s3", "l3", "w3"))
        before = snapshot(engine)

        assert not engine.suggest(triple(small_catalog, "s1", "l1", "w1"))
        assert not engine.accuse(triple(small_catalog, "s1", "l1", "w1"))
        assert not engine.end_turn()
        assert snapshot(engine) == before

    def test_accuse_before_start(self, small_catalog):
        """Test that no action is possible during setup."""
        engine = GameEngine(small_catalog)
        assert not engine.accuse(triple(small_catalog, "s1", "l1", "w1"))
        assert engine.state.phase == GamePhase.SETUP


class TestTurns:
    """Tests for end_turn and play_computer_turn."""

    def test_end_turn_cycles(self, engine):
        """Test that turns go round the table."""
        seats = []
        for _ in range(4):
            engine.end_turn()
            seats.append(engine.state.current_player_index)

        assert seats == [1, 2, 0, 1]
        assert engine.state.turn_count == 5

    def test_computer_turn_rejected_for_human(self, engine):
        """Test that the human seat is never auto-played."""
        result = engine.play_computer_turn()
        assert not result
        assert engine.state.current_player_index == 0

    def test_computer_turn_ends_itself(self, engine, small_catalog, policy):
        """Test that a computer suggestion resolved among computers ends the turn."""
        policy.hypothesis = triple(small_catalog, "s2", "l3", "w3")
        engine.end_turn()

        result = engine.play_computer_turn()

        assert result.refutation.refuted
        assert engine.state.current_player_index == 2
        assert engine.state.turn_count == 3

    def test_unrefuted_computer_turn(self, engine, small_catalog, policy):
        """Test the log when nobody refutes a computer."""
        policy.hypothesis = triple(small_catalog, "s3", "l3", "w3")
        engine.end_turn()
        engine.end_turn()

        engine.play_computer_turn()

        assert any(
            entry.message == "Personne n'a réfuté l'hypothèse de Rival 2."
            for entry in engine.state.log
        )
        assert engine.state.current_player_index == 0

    def test_invalid_policy_suggestion(self, engine):
        """Test that a policy returning nothing does not advance the game."""
        engine.end_turn()
        before = snapshot(engine)

        assert not engine.play_computer_turn()
        assert snapshot(engine) == before


class TestReadHelpers:
    """Tests for read-only engine helpers."""

    def test_last_log_message(self, small_catalog, engine):
        """Test the last log line and its default."""
        assert GameEngine(small_catalog).last_log_message() == "Jeu commencé"
        engine.append_log("Bonjour")
        assert engine.last_log_message() == "Bonjour"

    def test_cleared_cards(self, engine):
        """Test that cleared and held marks count as ruled out."""
        engine.notebook.auto_clear("w2")
        engine.notebook.toggle("s1")
        engine.notebook.toggle("s1")
        engine.notebook.toggle("s1")

        assert [c.id for c in engine.cleared_cards()] == ["s1", "w2"]

    def test_log_callback(self, engine, small_catalog):
        """Test that every appended entry reaches the callback."""
        entries = []
        engine.set_callbacks(on_log=entries.append)
        engine.suggest(triple(small_catalog, "s1", "l1", "w1"))
        assert [e.message for e in entries] == [e.message for e in engine.state.log[-2:]]


class TestComputerAccusation:
    """Tests for accusations made on a computer's turn."""

    def test_computer_wins(self, engine, small_catalog):
        """Test that a computer's correct accusation names the computer."""
        engine.end_turn()
        result = engine.accuse(triple(small_catalog, "s3", "l3", "w3"))

        assert result.phase == GamePhase.WON
        assert engine.state.log[-1].message == "CORRECT ! Rival 1 a résolu le mystère !"

    def test_computer_loses(self, engine, small_catalog):
        """Test that a computer's wrong accusation names the computer."""
        engine.end_turn()
        engine.end_turn()
        result = engine.accuse(triple(small_catalog, "s1", "l3", "w3"))

        assert result.phase == GamePhase.LOST
        message = engine.state.log[-1].message
        assert message.startswith("FAUX ! Rival 2")
        assert "Vous" not in message


class TestForgedCards:
    """Tests for cards that do not match the dealt catalog."""

    def test_reused_id_in_other_category(self, engine, small_catalog):
        """Test that a card reusing a real id under another category is refused."""
        before = snapshot(engine)
        forged = make_card("l1", CardCategory.SUSPECT, "Imposteur")
        hypothesis = Hypothesis(
            suspect=forged,
            location=small_catalog.get("l2"),
            weapon=small_catalog.get("w1"),
        )

        result = engine.suggest(hypothesis)

        assert not result
        assert "l1" in result.error_message
        assert snapshot(engine) == before

    def test_renamed_card_refused(self, engine, small_catalog):
        """Test that a card differing from its catalog entry is refused."""
        forged = make_card("s1", CardCategory.SUSPECT, "Autre nom")
        hypothesis = Hypothesis(
            suspect=forged,
            location=small_catalog.get("l1"),
            weapon=small_catalog.get("w1"),
        )
        assert not engine.accuse(hypothesis)
        assert engine.state.phase == GamePhase.PLAYING
