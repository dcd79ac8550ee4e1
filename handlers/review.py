import logging
from datetime import date
from typing import Mapping, Optional, Union

from pydantic import ValidationError

from db.store import DeckStore, find_card, find_deck
from models.card import Card
from models.errors import ReviewValidationError
from models.review import ReviewButton, ReviewResult, ReviewSubmission
from utils.grading import quality_for_button
from utils.progress import next_card_for_review, recompute_counters
from utils.sm2 import PASSING_QUALITY, schedule

logger = logging.getLogger(__name__)

def validate_submission(deck_id: str, card_id: str, quality) -> ReviewSubmission:
    try:
        return ReviewSubmission(deck_id=deck_id, card_id=card_id, quality=quality)
    except ValidationError as exc:
        raise ReviewValidationError(f"Invalid review quality {quality!r}: must be an integer 0-5") from exc

def submit_review(
    store: DeckStore,
    submission: ReviewSubmission,
    today: Optional[date] = None,
) -> ReviewResult:
    """Schedule one review and persist the deck, all under the store lock."""
    today = today or date.today()
    success = submission.quality >= PASSING_QUALITY
    with store.transaction() as decks:
        deck, index, card = find_card(decks, submission.deck_id, submission.card_id)
        updated = schedule(card, submission.quality, today=today)
        if success:
            updated.point += 1
        deck.cards[index] = updated
        deck.studied = True
        recompute_counters(deck, today)
    logger.info(
        "Reviewed card %s in deck %s: quality=%d interval=%d due=%s",
        updated.id, deck.id, submission.quality, updated.interval_days, updated.due_date,
    )
    return ReviewResult(deck_id=deck.id, card=updated, quality=submission.quality, success=success)

def submit_button(
    store: DeckStore,
    deck_id: str,
    card_id: str,
    button: Union[str, ReviewButton],
    mapping: Optional[Mapping[ReviewButton, int]] = None,
    today: Optional[date] = None,
) -> ReviewResult:
    quality = quality_for_button(button, mapping)
    return submit_review(store, validate_submission(deck_id, card_id, quality), today=today)

def next_card(store: DeckStore, deck_id: str, today: Optional[date] = None) -> Optional[Card]:
    deck = find_deck(store.load_all(), deck_id)
    return next_card_for_review(deck, today)
