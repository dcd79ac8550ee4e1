import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from config import load_config, CONFIG_DIR
from db.database import get_store, init_store
from handlers import create_deck, delete_deck, generate_deck, get_deck, list_decks, next_card, submit_button, submit_review, validate_submission
from models.errors import CardGenerationError, DeckAssemblyError, RecallKitError
from utils.grading import load_button_quality
from utils.mastery import get_mastery_rules
from utils.progress import deck_stats

def configure_logging(config: dict) -> None:
    level = getattr(logging, config.get("logging", {}).get("level", "INFO"), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

def cmd_init(args, config) -> int:
    store = init_store(config)
    print(f"Deck store initialized at {store.path} (config in {CONFIG_DIR})")
    return 0

def cmd_list(args, config) -> int:
    decks = list_decks(get_store(config))
    if not decks:
        print("No decks yet.")
        return 0
    for deck in decks:
        studied = "studied" if deck.studied else "new"
        print(f"{deck.id}  {deck.name}  [{studied}]  total={deck.total} learned={deck.learned} due={deck.due}")
    return 0

def cmd_import(args, config) -> int:
    try:
        raw_cards = json.loads(Path(args.file).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DeckAssemblyError(f"{args.file} is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DeckAssemblyError(f"{args.file} is not UTF-8 text") from exc
    if isinstance(raw_cards, dict):
        raw_cards = raw_cards.get("cards", [])
    name = args.name or Path(args.file).stem
    deck = create_deck(
        get_store(config),
        name,
        args.description or f"Imported from {Path(args.file).name}",
        raw_cards,
    )
    print(f"Created deck {deck.id} with {deck.total} cards")
    return 0

def cmd_generate(args, config) -> int:
    try:
        text = Path(args.file).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CardGenerationError(f"{args.file} is not UTF-8 text") from exc
    name = args.name or Path(args.file).stem
    deck = generate_deck(
        get_store(config),
        text,
        name,
        description=f"Generated from {Path(args.file).name}",
    )
    print(f"Created deck {deck.id} with {deck.total} cards")
    return 0

def cmd_review(args, config) -> int:
    store = get_store(config)
    if args.grade.isdigit():
        submission = validate_submission(args.deck_id, args.card_id, int(args.grade))
        result = submit_review(store, submission)
    else:
        result = submit_button(store, args.deck_id, args.card_id, args.grade, load_button_quality(config))
    card = result.card
    print(
        f"quality={result.quality} repetitions={card.repetitions} interval={card.interval_days}d "
        f"ef={card.easiness_factor:.2f} due={card.due_date.isoformat()}"
    )
    return 0

def cmd_next(args, config) -> int:
    card = next_card(get_store(config), args.deck_id)
    if card is None:
        print("Nothing due in this deck.")
        return 0
    print(f"{card.id}\nQ: {card.question}")
    if args.show_answer:
        print(f"A: {card.answer}")
    return 0

def cmd_stats(args, config) -> int:
    deck = get_deck(get_store(config), args.deck_id)
    stats = deck_stats(deck, rules=get_mastery_rules(config))
    print(f"{deck.name}")
    print(f"  total={stats.total} due={stats.due} learned={stats.learned} mastered={stats.mastered} ({stats.mastery_percent}%)")
    print(f"  average ef={stats.average_easiness} points={stats.points}")
    return 0

def cmd_delete(args, config) -> int:
    deck = delete_deck(get_store(config), args.deck_id)
    print(f"Deleted deck {deck.id} ({deck.name})")
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recallkit", description="Spaced-repetition flashcard decks")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="Initialize config and deck store")
    p.set_defaults(func=cmd_init)

    p = sub.add_parser("list", help="List decks")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("import", help="Create a deck from a JSON list of cards")
    p.add_argument("file")
    p.add_argument("--name")
    p.add_argument("--description")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("generate", help="Generate a deck from a text file with the local model")
    p.add_argument("file")
    p.add_argument("--name")
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser("review", help="Record a review: forgot|hard|easy or a 0-5 quality")
    p.add_argument("deck_id")
    p.add_argument("card_id")
    p.add_argument("grade")
    p.set_defaults(func=cmd_review)

    p = sub.add_parser("next", help="Show the next due card")
    p.add_argument("deck_id")
    p.add_argument("--show-answer", action="store_true")
    p.set_defaults(func=cmd_next)

    p = sub.add_parser("stats", help="Show deck progress")
    p.add_argument("deck_id")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("delete", help="Delete a deck")
    p.add_argument("deck_id")
    p.set_defaults(func=cmd_delete)
    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    configure_logging(config)
    try:
        return args.func(args, config)
    except (RecallKitError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())
