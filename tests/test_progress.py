from datetime import date, timedelta

from utils.assembly import assemble_deck
from utils.mastery import DEFAULT_MASTERY_RULES, get_mastery_rules, mastery_percent, mastery_status
from utils.progress import deck_stats, due_cards, next_card_for_review, recompute_counters
from utils.sm2 import schedule

TODAY = date(2024, 5, 1)


def _deck(count=3):
    raw = [{"question": f"Q{i}", "answer": f"A{i}"} for i in range(count)]
    return assemble_deck("Physics", "", raw, today=TODAY)


def test_recompute_counters_follows_card_state():
    deck = _deck()
    deck.cards[0] = schedule(deck.cards[0], 5, today=TODAY)
    deck.cards[1] = schedule(deck.cards[1], 1, today=TODAY)
    deck.total = deck.due = deck.learned = 99

    recompute_counters(deck, TODAY)

    assert deck.total == 3
    assert deck.learned == 1
    assert deck.due == 1

    recompute_counters(deck, TODAY + timedelta(days=1))
    assert deck.due == 3


def test_due_cards_are_ordered_by_due_date_then_deck_order():
    deck = _deck(4)
    deck.cards[0].due_date = TODAY - timedelta(days=1)
    deck.cards[2].due_date = TODAY + timedelta(days=3)

    ordered = due_cards(deck, TODAY)

    assert [c.question for c in ordered] == ["Q0", "Q1", "Q3"]
    assert next_card_for_review(deck, TODAY).question == "Q0"


def test_next_card_is_none_when_nothing_is_due():
    deck = _deck(1)
    deck.cards[0] = schedule(deck.cards[0], 5, today=TODAY)

    assert next_card_for_review(deck, TODAY) is None


def test_mastery_status_progression():
    deck = _deck(1)
    card = deck.cards[0]
    assert mastery_status(card) == "new"

    card = schedule(card, 5, today=TODAY)
    assert mastery_status(card) == "learning"

    card = schedule(schedule(card, 5, today=TODAY), 5, today=TODAY)
    assert card.interval_days >= 7
    assert mastery_status(card) == "mastered"


def test_mastery_rules_from_config():
    rules = get_mastery_rules({"mastery": {"consecutive_reviews": 5}})

    assert rules["consecutive_reviews"] == 5
    assert rules["min_interval_days"] == DEFAULT_MASTERY_RULES["min_interval_days"]
    assert get_mastery_rules(None) == DEFAULT_MASTERY_RULES


def test_deck_stats():
    deck = _deck(4)
    for _ in range(3):
        deck.cards[0] = schedule(deck.cards[0], 5, today=TODAY)
    deck.cards[0].point = 3
    deck.cards[1] = schedule(deck.cards[1], 4, today=TODAY)

    stats = deck_stats(deck, TODAY)

    assert stats.total == 4
    assert stats.due == 2
    assert stats.learned == 2
    assert stats.mastered == 1
    assert stats.mastery_percent == 25.0
    assert stats.points == 3


def test_mastery_percent_handles_empty_deck():
    assert mastery_percent(0, 0) == 0.0
    assert deck_stats(_deck(0), TODAY).average_easiness == 0.0
