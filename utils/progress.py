from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from models.card import Card
from models.deck import Deck
from utils.mastery import mastery_percent, mastery_status


@dataclass(frozen=True)
class DeckStats:
    total: int
    due: int
    learned: int
    mastered: int
    mastery_percent: float
    average_easiness: float
    points: int


def is_due(card: Card, today: Optional[date] = None) -> bool:
    return card.due_date <= (today or date.today())


def count_due(cards: List[Card], today: Optional[date] = None) -> int:
    anchor = today or date.today()
    return sum(1 for card in cards if is_due(card, anchor))


def count_learned(cards: List[Card]) -> int:
    return sum(1 for card in cards if card.repetitions >= 1)


def recompute_counters(deck: Deck, today: Optional[date] = None) -> Deck:
    """Bring the cached total/learned/due counters back in line with the cards."""
    deck.total = len(deck.cards)
    deck.learned = count_learned(deck.cards)
    deck.due = count_due(deck.cards, today)
    return deck


def due_cards(deck: Deck, today: Optional[date] = None) -> List[Card]:
    anchor = today or date.today()
    # sorted() is stable, so ties keep deck order.
    return sorted((c for c in deck.cards if is_due(c, anchor)), key=lambda c: c.due_date)


def next_card_for_review(deck: Deck, today: Optional[date] = None) -> Optional[Card]:
    cards = due_cards(deck, today)
    if cards:
        return cards[0]
    return None


def deck_stats(deck: Deck, today: Optional[date] = None, rules: Optional[dict] = None) -> DeckStats:
    total = len(deck.cards)
    mastered = sum(1 for card in deck.cards if mastery_status(card, rules) == "mastered")
    average = sum(card.easiness_factor for card in deck.cards) / total if total else 0.0
    return DeckStats(
        total=total,
        due=count_due(deck.cards, today),
        learned=count_learned(deck.cards),
        mastered=mastered,
        mastery_percent=mastery_percent(mastered, total),
        average_easiness=round(average, 2),
        points=sum(card.point for card in deck.cards),
    )
