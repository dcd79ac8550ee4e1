import logging
from datetime import date

import pytest

from models.card import RawCard
from models.errors import DeckAssemblyError
from utils.assembly import assemble_deck

TODAY = date(2024, 5, 1)


def test_empty_card_list_builds_empty_deck(caplog):
    with caplog.at_level(logging.WARNING, logger="utils.assembly"):
        deck = assemble_deck("Biology", "Generated from bio.pdf", [], today=TODAY)

    assert deck.cards == []
    assert (deck.total, deck.due, deck.learned) == (0, 0, 0)
    assert deck.studied is False
    assert "no cards" in caplog.text


def test_cards_get_fresh_ids_and_default_schedule():
    raw = [
        {"question": "What is ATP?", "answer": "Energy carrier", "keyword": "molecule"},
        RawCard(question="Where is DNA stored?", answer="In the nucleus", image="https://img.example/dna.png"),
        {"question": "What is a ribosome?", "answer": "Protein factory"},
    ]

    deck = assemble_deck("Biology", "Cells", raw, today=TODAY)

    assert deck.total == 3
    assert deck.due == 3
    assert deck.learned == 0
    assert deck.studied is False
    assert len({card.id for card in deck.cards}) == 3
    for card in deck.cards:
        assert card.easiness_factor == 2.5
        assert card.repetitions == 0
        assert card.interval_days == 0
        assert card.point == 0
        assert card.due_date == TODAY
    assert deck.cards[0].keyword == "molecule"
    assert deck.cards[0].image is None
    assert deck.cards[1].image == "https://img.example/dna.png"
    assert deck.cards[1].keyword is None
    assert [c.question for c in deck.cards] == [r["question"] if isinstance(r, dict) else r.question for r in raw]


def test_deck_ids_are_unique_across_assemblies():
    first = assemble_deck("A", "", [{"question": "q", "answer": "a"}], today=TODAY)
    second = assemble_deck("A", "", [{"question": "q", "answer": "a"}], today=TODAY)

    assert first.id != second.id
    assert first.cards[0].id != second.cards[0].id


def test_blank_answer_is_rejected_with_index():
    raw = [
        {"question": "ok", "answer": "fine"},
        {"question": "Missing answer", "answer": "   "},
    ]

    with pytest.raises(DeckAssemblyError, match="Raw card 1"):
        assemble_deck("Deck", "", raw, today=TODAY)


def test_missing_question_is_rejected():
    with pytest.raises(DeckAssemblyError, match="question"):
        assemble_deck("Deck", "", [{"answer": "42"}], today=TODAY)


def test_blank_deck_name_is_rejected():
    with pytest.raises(DeckAssemblyError):
        assemble_deck("  ", "", [{"question": "q", "answer": "a"}], today=TODAY)


def test_summary_is_carried_on_the_deck():
    deck = assemble_deck("History", "WW2", [], summary="Long-form notes", today=TODAY)

    assert deck.summary == "Long-form notes"
    assert deck.created_at == TODAY


@pytest.mark.parametrize("raw_cards", [None, 3, "question", {"question": "q", "answer": "a"}])
def test_raw_cards_must_be_a_list(raw_cards):
    with pytest.raises(DeckAssemblyError, match="must be a list"):
        assemble_deck("Deck", "", raw_cards, today=TODAY)
