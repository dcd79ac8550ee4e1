"""SM-2 review scheduling.

The scheduler works on the native 0-5 quality scale. Translating UI buttons
into a quality lives with the caller (see ``utils.grading``).
"""
import logging
import math
from datetime import date, timedelta
from typing import Optional, Tuple

from models.card import Card, MIN_EASINESS_FACTOR

logger = logging.getLogger(__name__)

MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3

def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)

def clamp_quality(quality: int) -> int:
    """Clamp a grade into 0-5, logging when the caller passed something out of range."""
    clamped = max(MIN_QUALITY, min(MAX_QUALITY, int(quality)))
    if clamped != quality:
        logger.warning("Quality %r outside %d-%d, clamped to %d", quality, MIN_QUALITY, MAX_QUALITY, clamped)
    return clamped

def next_easiness(easiness_factor: float, quality: int) -> float:
    """Standard SM-2 easiness adjustment, floored at 1.3."""
    miss = MAX_QUALITY - quality
    return max(MIN_EASINESS_FACTOR, easiness_factor + (0.1 - miss * (0.08 + miss * 0.02)))

def update_sm2(
    interval_days: int,
    easiness_factor: float,
    quality: int,
    repetitions: int,
    base_date: Optional[date] = None,
) -> Tuple[int, float, int, date]:
    """Update SM-2 parameters and compute new due date."""
    quality = clamp_quality(quality)
    if quality < PASSING_QUALITY:
        # Lapses reset the streak but leave easiness alone.
        new_repetitions = 0
        new_interval = 1
        new_ef = easiness_factor
    else:
        if repetitions == 0:
            new_interval = 1
        elif repetitions == 1:
            new_interval = 6
        else:
            new_interval = round_half_up(interval_days * easiness_factor)
        new_repetitions = repetitions + 1
        new_ef = next_easiness(easiness_factor, quality)
    anchor = base_date or date.today()
    new_due = anchor + timedelta(days=new_interval)
    return new_interval, new_ef, new_repetitions, new_due

def schedule(card: Card, quality: int, today: Optional[date] = None) -> Card:
    """Return a copy of ``card`` with its scheduling state advanced by one review."""
    new_interval, new_ef, new_repetitions, new_due = update_sm2(
        card.interval_days,
        card.easiness_factor,
        quality,
        card.repetitions,
        base_date=today or date.today(),
    )
    return card.model_copy(
        update={
            "interval_days": new_interval,
            "easiness_factor": new_ef,
            "repetitions": new_repetitions,
            "due_date": new_due,
        }
    )
