"""Main entry point: play the deduction game in a terminal."""

import argparse
import asyncio
import logging
import random
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path

from clue_engine.config import Config, load_config
from clue_engine.errors import SetupError
from clue_engine.game.engine import GameEngine
from clue_engine.game.notebook import Notebook
from clue_engine.game.session import GameSession
from clue_engine.logging import GameLogConfig, GameLogger
from clue_engine.models.card import (
    CATEGORY_ORDER,
    CATEGORY_STYLES,
    Card,
    CardCategory,
    Hypothesis,
)
from clue_engine.models.catalog import CardCatalog, load_catalog
from clue_engine.models.game_state import Difficulty
from clue_engine.narrative import NarrativeService
from clue_engine.utils.logger import GameDisplay, setup_logging

logger = logging.getLogger(__name__)

# Poll interval while a computer turn is scheduled
IDLE_SLEEP = 0.05

HELP_TEXT = (
    "Commands:\n"
    "  s S1 L2 W3   suggest (codes from the list above)\n"
    "  a S1 L2 W3   accuse (ends the game)\n"
    "  n S4         toggle a notebook mark\n"
    "  h            ask the assistant for a hint\n"
    "  q            quit"
)


def generate_log_filename(log_dir: str) -> str:
    """Generate log filename with a timestamp.

    Args:
        log_dir: Directory for log files.

    Returns:
        Full path to log file.
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    return str(Path(log_dir) / f"{timestamp}_clue.jsonl")


def parse_card_code(code: str, catalog: CardCatalog) -> Card | None:
    """Resolve a display code such as "L3" to a card."""
    code = code.strip().upper()
    for category in CATEGORY_ORDER:
        prefix = CATEGORY_STYLES[category].code
        if code.startswith(prefix) and code[len(prefix):].isdigit():
            cards = catalog.by_category(category)
            index = int(code[len(prefix):]) - 1
            if 0 <= index < len(cards):
                return cards[index]
    return None


def parse_hypothesis(codes: list[str], catalog: CardCatalog) -> Hypothesis:
    """Build a possibly incomplete hypothesis from display codes."""
    slots: dict[str, Card] = {}
    for code in codes:
        card = parse_card_code(code, catalog)
        if card is not None:
            slots[card.category.value.lower()] = card
    return Hypothesis(**slots)


def remaining_candidates(
    catalog: CardCatalog,
    hand: list[Card],
    notebook: Notebook,
) -> dict[CardCategory, list[Card]]:
    """Cards per category not held and not ruled out in the notebook."""
    excluded = {c.id for c in hand} | notebook.cleared_ids()
    return {
        category: [c for c in catalog.by_category(category) if c.id not in excluded]
        for category in CATEGORY_ORDER
    }


def auto_hypothesis(engine: GameEngine, rng: random.Random) -> tuple[Hypothesis, bool]:
    """Pick a move for the human seat in auto mode.

    Returns:
        Tuple of (hypothesis, accuse)
    """
    candidates = remaining_candidates(engine.game_catalog, engine.human.hand, engine.notebook)
    picks = [rng.choice(candidates[category]) for category in CATEGORY_ORDER]
    solved = all(len(candidates[category]) == 1 for category in CATEGORY_ORDER)
    return Hypothesis.from_cards(picks), solved


async def ask(prompt: str) -> str:
    return (await asyncio.to_thread(input, prompt)).strip()


async def human_turn(
    session: GameSession,
    display: GameDisplay,
    auto: bool,
    rng: random.Random,
) -> bool:
    """Play the human's turn.

    Returns:
        False if the player quit
    """
    engine = session.engine

    if auto:
        hypothesis, accuse = auto_hypothesis(engine, rng)
        if accuse:
            engine.accuse(hypothesis)
            return True
        result = engine.suggest(hypothesis)
        if result.refutation is not None and not result.refutation.refuted:
            # Nobody could refute cards we do not hold: that is the answer
            engine.accuse(hypothesis)
            return True
        session.end_human_turn()
        return True

    display.print_turn(engine.state)
    display.print_hand(engine.human)
    display.print_choices(engine.game_catalog, engine.notebook)

    while True:
        line = await ask("> ")
        if not line:
            continue
        command, *codes = line.split()
        command = command.lower()

        if command == "q":
            return False
        if command == "h":
            await session.request_hint()
            continue
        if command == "n" and codes:
            card = parse_card_code(codes[0], engine.game_catalog)
            if card is not None:
                status = engine.notebook.toggle(card.id)
                print(f"{card.name}: {status.value}")
            continue
        if command in ("s", "a"):
            hypothesis = parse_hypothesis(codes, engine.game_catalog)
            if command == "a":
                result = engine.accuse(hypothesis)
                if result:
                    return True
            else:
                result = engine.suggest(hypothesis)
                if result:
                    display.print_suggestion_result(
                        hypothesis, result.refutation, engine.players
                    )
                    await ask("Press Enter to end your turn...")
                    session.end_human_turn()
                    return True
            print(f"Invalid: {result.error_message}")
            continue
        print(HELP_TEXT)


async def human_refutation(
    session: GameSession,
    display: GameDisplay,
    auto: bool,
    rng: random.Random,
) -> None:
    """Let the human pick the card to show to a computer."""
    engine = session.engine
    pending = engine.state.pending_refutation

    if auto:
        card = rng.choice(pending.matches)
        session.respond_to_refutation(card.id)
        return

    display.print_refutation_request(pending, engine.players)
    while True:
        choice = await ask("Card to show: ")
        if choice.isdigit() and 1 <= int(choice) <= len(pending.matches):
            session.respond_to_refutation(pending.matches[int(choice) - 1].id)
            return


async def play_game(
    session: GameSession,
    display: GameDisplay,
    num_players: int,
    auto: bool,
    rng: random.Random,
) -> bool:
    """Play one game to the end.

    Returns:
        False if the player quit
    """
    engine = session.engine
    session.start(num_players)

    display.print_game_start(engine.state)
    display.print_hands(engine.players)
    display.print_flavor(await session.request_intro())

    while not engine.state.phase.is_over:
        if engine.state.pending_refutation is not None:
            await human_refutation(session, display, auto, rng)
        elif engine.is_human_turn:
            if not await human_turn(session, display, auto, rng):
                return False
        else:
            await asyncio.sleep(IDLE_SLEEP)

    conclusion = await session.request_conclusion()
    display.print_game_end(engine.state, conclusion)
    return True


async def run_games(
    engine: GameEngine,
    narrative: NarrativeService,
    display: GameDisplay,
    config: Config,
    num_games: int,
    auto: bool,
) -> Counter:
    """Play games in one session and count the outcomes."""
    rng = random.Random(config.game.seed)
    results: Counter = Counter()

    with GameSession(engine, narrative) as session:
        for _ in range(num_games):
            finished = await play_game(
                session, display, config.game.num_players, auto, rng
            )
            if not finished:
                break
            results[engine.state.phase.value] += 1
    return results


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    parser = argparse.ArgumentParser(
        description="Detective deduction card game (Clue-style)"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "-n",
        "--players",
        type=int,
        help="Number of players, 2-4 (overrides config)",
    )
    parser.add_argument(
        "-g",
        "--games",
        type=int,
        default=1,
        help="Number of games to play",
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        help="Computer difficulty (overrides config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (overrides config)",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Card catalog file (YAML)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        help="Seconds a computer 'thinks' before playing",
    )
    parser.add_argument(
        "--auto",
        action="store_true",
        help="Let the computer play the human seat too",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-hands",
        action="store_true",
        help="Show every player's hand (spoilers)",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )

    args = parser.parse_args()

    # Load config
    config = load_config(args.config)

    # Apply command-line overrides
    if args.players:
        config.game.num_players = args.players
    if args.difficulty:
        config.game.difficulty = Difficulty(args.difficulty)
    if args.seed is not None:
        config.game.seed = args.seed
    if args.catalog:
        config.catalog.path = str(args.catalog)
    if args.delay is not None:
        config.timing.computer_turn_delay = args.delay
    elif args.auto:
        config.timing.computer_turn_delay = 0.0
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_hands:
        config.logging.show_hands = True

    game_log_enabled = args.game_log is not None or config.game_log.enabled
    game_log_dir = str(args.game_log) if args.game_log else config.game_log.output_path

    setup_logging(config.logging.level)
    display = GameDisplay(show_hands=config.logging.show_hands)

    if game_log_enabled:
        log_path = generate_log_filename(game_log_dir)
        game_log_config = GameLogConfig(enabled=True, output_path=log_path)
        print(f"Game log: {log_path}")
    else:
        game_log_config = GameLogConfig(enabled=False)

    try:
        catalog = load_catalog(config.catalog.path)
        narrative = NarrativeService.from_config(
            config.narrative, timeout=config.timing.narrative_timeout
        )
        if not narrative.available:
            logger.info("No narrative API key configured, using built-in text")

        with GameLogger(game_log_config) as game_logger:
            engine = GameEngine(catalog, config, game_logger=game_logger)
            engine.set_callbacks(on_log=display.print_log_entry)

            results = asyncio.run(
                run_games(engine, narrative, display, config, args.games, args.auto)
            )
            if game_log_enabled:
                game_logger.log_session_end(sum(results.values()), dict(results))
            if args.games > 1:
                display.print_final_results(dict(results))

        return 0

    except SetupError as e:
        logger.error(f"Cannot start game: {e}")
        return 2
    except KeyboardInterrupt:
        print("\nGame interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Game error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
