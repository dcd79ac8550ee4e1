import logging
from datetime import date
from typing import Callable, List, Optional, Sequence

from db.store import DeckStore, find_deck
from models.card import RawCard
from models.deck import Deck
from utils.assembly import RawCardInput, assemble_deck
from utils.ollama import generate_raw_cards
from utils.progress import recompute_counters

logger = logging.getLogger(__name__)

CardSource = Callable[[str], List[RawCard]]

def list_decks(store: DeckStore, today: Optional[date] = None) -> List[Deck]:
    """All decks with counters recomputed for ``today``. Read only."""
    return [recompute_counters(deck, today) for deck in store.load_all()]

def get_deck(store: DeckStore, deck_id: str, today: Optional[date] = None) -> Deck:
    return recompute_counters(find_deck(store.load_all(), deck_id), today)

def create_deck(
    store: DeckStore,
    name: str,
    description: str,
    raw_cards: Sequence[RawCardInput],
    summary: Optional[str] = None,
) -> Deck:
    """Assemble a deck and append it to the store in one transaction."""
    deck = assemble_deck(name, description, raw_cards, summary=summary)
    with store.transaction() as decks:
        decks.append(deck)
    logger.info("Created deck %s (%r) with %d cards", deck.id, deck.name, deck.total)
    return deck

def generate_deck(
    store: DeckStore,
    text: str,
    name: str,
    description: Optional[str] = None,
    source: Optional[CardSource] = None,
) -> Deck:
    """Generate cards for ``text`` and persist them as a new deck.

    Generation runs before the store is touched, so a failure leaves the
    persisted decks as they were.
    """
    source = source or generate_raw_cards
    raw_cards = source(text)
    if not raw_cards:
        logger.warning("Card generation returned nothing for deck %r", name)
    return create_deck(
        store,
        name,
        description if description is not None else f"Generated from {name}",
        raw_cards,
    )

def delete_deck(store: DeckStore, deck_id: str) -> Deck:
    with store.transaction() as decks:
        deck = find_deck(decks, deck_id)
        decks.remove(deck)
    logger.info("Deleted deck %s (%r)", deck.id, deck.name)
    return deck

def mark_studied(store: DeckStore, deck_id: str, studied: bool = True) -> Deck:
    with store.transaction() as decks:
        deck = find_deck(decks, deck_id)
        deck.studied = studied
    return deck
