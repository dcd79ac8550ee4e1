from typing import Any, Dict, Mapping, Optional, Union

from config import load_config
from models.errors import ReviewValidationError
from models.review import ReviewButton
from .sm2 import MAX_QUALITY, MIN_QUALITY

# Three review buttons mapped onto the SM-2 0-5 scale.
DEFAULT_BUTTON_QUALITY: Dict[ReviewButton, int] = {
    ReviewButton.FORGOT: 1,
    ReviewButton.HARD: 3,
    ReviewButton.EASY: 5,
}

def load_button_quality(config: Optional[Dict[str, Any]] = None) -> Dict[ReviewButton, int]:
    """Build the button table from ``[review.button_quality]``, falling back to the defaults."""
    if config is None:
        config = load_config()
    overrides = config.get("review", {}).get("button_quality", {})
    mapping = DEFAULT_BUTTON_QUALITY.copy()
    for name, quality in overrides.items():
        button = parse_button(name)
        mapping[button] = validate_quality(quality)
    return mapping

def parse_button(value: Union[str, ReviewButton]) -> ReviewButton:
    try:
        return ReviewButton(str(getattr(value, "value", value)).strip().lower())
    except ValueError:
        choices = ", ".join(b.value for b in ReviewButton)
        raise ReviewValidationError(f"Unknown review button {value!r} (expected one of: {choices})") from None

def validate_quality(quality: Any) -> int:
    """Reject anything that is not an integer grade in 0-5."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ReviewValidationError(f"Quality must be an integer, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ReviewValidationError(f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}")
    return quality

def quality_for_button(
    button: Union[str, ReviewButton],
    mapping: Optional[Mapping[ReviewButton, int]] = None,
) -> int:
    """Map a review button to an SM-2 quality score (0-5)."""
    table = mapping if mapping is not None else DEFAULT_BUTTON_QUALITY
    return table[parse_button(button)]
