from typing import Any, Dict, Optional

from models.card import Card

DEFAULT_MASTERY_RULES = {
    "consecutive_reviews": 3,
    "min_easiness_factor": 2.5,
    "min_interval_days": 7,
}

def get_mastery_rules(config: Optional[Dict[str, Any]] = None) -> dict:
    rules = DEFAULT_MASTERY_RULES.copy()
    if not config:
        return rules
    overrides = config.get("mastery", {})
    return {
        "consecutive_reviews": int(overrides.get("consecutive_reviews", rules["consecutive_reviews"])),
        "min_easiness_factor": float(overrides.get("min_easiness_factor", rules["min_easiness_factor"])),
        "min_interval_days": int(overrides.get("min_interval_days", rules["min_interval_days"])),
    }

def mastery_status_from_rules(
    repetitions: int,
    easiness_factor: float,
    interval_days: int,
    rules: dict,
) -> str:
    if repetitions <= 0:
        return "new"
    if (
        repetitions >= rules["consecutive_reviews"]
        and easiness_factor >= rules["min_easiness_factor"]
        and interval_days >= rules["min_interval_days"]
    ):
        return "mastered"
    return "learning"

def mastery_status(card: Card, rules: Optional[dict] = None) -> str:
    return mastery_status_from_rules(
        card.repetitions,
        card.easiness_factor,
        card.interval_days,
        rules or DEFAULT_MASTERY_RULES,
    )

def mastery_percent(mastered: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round((mastered / total) * 100, 1)
