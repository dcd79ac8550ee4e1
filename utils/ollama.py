import json
import logging
import re
import subprocess
from typing import List, Optional

from pydantic import ValidationError

from config import load_config
from models.card import RawCard
from models.errors import CardGenerationError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)

def call_llm(prompt: str, model: str = None, timeout: int = None) -> Optional[str]:
    """Call local Ollama model with prompt, return response or None on error."""
    config = load_config()
    model = model or config.get('ollama', {}).get('model', 'llama3.2')
    timeout = timeout or config.get('ollama', {}).get('timeout', 120)
    cmd = ['ollama', 'run', model]
    try:
        result = subprocess.run(
            cmd,
            input=prompt,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
            encoding='utf-8'
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.warning("Ollama call failed: %s", e)
        return None

def _extract_json(text: str) -> str:
    fenced = _FENCE_RE.search(text)
    if fenced:
        return fenced.group(1).strip()
    start = text.find('[')
    end = text.rfind(']')
    if start != -1 and end > start:
        return text[start:end + 1]
    return text.strip()

def parse_generated_cards(text: str) -> List[RawCard]:
    """Validate model output into raw cards.

    Accepts a JSON array of ``{"question", "answer", "keyword"?}`` objects,
    optionally wrapped in a code fence, surrounding prose, or an object with a
    ``cards`` key.
    """
    if not text or not text.strip():
        raise CardGenerationError("Model returned an empty response")
    try:
        data = json.loads(_extract_json(text))
    except json.JSONDecodeError as exc:
        logger.error("Invalid model response: %s", text[:500])
        raise CardGenerationError("Model did not return valid JSON") from exc
    if isinstance(data, dict):
        data = data.get('cards', data.get('flashcards'))
    if not isinstance(data, list):
        raise CardGenerationError("Model did not return a list of cards")
    cards: List[RawCard] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise CardGenerationError(f"Card {index} is not an object")
        try:
            cards.append(RawCard.model_validate({
                'question': item.get('question'),
                'answer': item.get('answer'),
                'keyword': item.get('keyword') or None,
                'image': item.get('image') or None,
            }))
        except ValidationError as exc:
            raise CardGenerationError(f"Card {index} is missing a question or answer") from exc
    return cards

def generate_raw_cards(text: str, model: str = None) -> List[RawCard]:
    """Ask the model for flashcards covering ``text``."""
    if not text or not text.strip():
        raise CardGenerationError("No source text to generate cards from")
    prompt = f"""Create study flashcards that cover the key ideas of the text below.

Respond with a JSON array only, in this form:
[{{"question": "...", "answer": "...", "keyword": "one or two words for an illustration"}}]

--- BEGIN TEXT ---
{text}
--- END TEXT ---
"""
    response = call_llm(prompt, model=model)
    if response is None:
        raise CardGenerationError("Card generation model is unavailable")
    return parse_generated_cards(response)
