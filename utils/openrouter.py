import hashlib
import json
import logging
import re
from typing import Dict, Iterable, List, Optional

import httpx

from config import load_config
from .hints import MAX_HINT_LENGTH, sanitize_hint

logger = logging.getLogger(__name__)

WORDS_PER_BATCH = 10
APP_TITLE = "Be-Spelling App"

SYSTEM_PROMPT = f"""You are a helpful assistant that generates age-appropriate spelling words for children.
Generate EXACTLY {WORDS_PER_BATCH} UNIQUE words based on the user's criteria.

For EACH word produce a JSON object with:
  - "text": the lowercase spelling word (letters only, no surrounding quotes inside the value)
  - "hint": a SHORT helpful clue for HOW to spell it (WITHOUT the word itself and NOT a hint for what the word means)

CRITICAL RULES FOR HINTS (must follow ALL):
  1. DO NOT include the exact spelling word (its full sequence of letters) anywhere in its own hint.
  2. Do not partially spell it with hyphens/spaces (e.g. c-a-t, or c a t) or disguised forms.
  3. Avoid saying "the word is" / "spells" / "means <word>".
  4. Keep hints kid-friendly and positive.
  5. Max ~{MAX_HINT_LENGTH} characters per hint.

Return ONLY valid JSON with this shape:
{{
  "words": [
    {{"text": "butterfly", "hint": "..."}},
    {{"text": "elephant", "hint": "..."}}
  ]
}}"""


class WordGenerationError(Exception):
    """Word generation failed; detail is safe to show to the learner."""

    def __init__(self, detail: str, status_code: int = 500):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def prompt_hash(prompt_template: str) -> str:
    return hashlib.sha256(prompt_template.strip().encode("utf-8")).hexdigest()[:16]


def build_user_prompt(prompt_template: str, existing_words: Optional[Iterable[str]] = None) -> str:
    prompt = f"Generate spelling words based on this criteria: {prompt_template}"
    existing = sorted({w.strip().lower() for w in (existing_words or []) if w and w.strip()})
    if existing:
        prompt += "\n\nDo NOT repeat any of these words the child already has: " + ", ".join(existing)
    return prompt


def call_openrouter(
    messages: List[Dict[str, str]],
    temperature: float,
    config: dict = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """POST a chat completion to OpenRouter and return the first message content."""
    if not config:
        config = load_config()
    openrouter_cfg = config.get("openrouter", {})
    api_key = openrouter_cfg.get("api_key")
    if not api_key:
        raise WordGenerationError("OpenRouter API key not configured")
    payload = {
        "model": openrouter_cfg.get("model", "google/gemini-2.5-flash"),
        "messages": messages,
        "temperature": temperature,
        "max_tokens": 1000,
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "X-Title": APP_TITLE,
    }
    url = openrouter_cfg.get("base_url", "https://openrouter.ai/api/v1").rstrip("/") + "/chat/completions"
    owns_client = client is None
    client = client or httpx.Client(timeout=openrouter_cfg.get("timeout", 30))
    try:
        response = client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("OpenRouter request failed: %s", exc)
        raise WordGenerationError("Failed to generate words") from exc
    finally:
        if owns_client:
            client.close()
    if response.is_error:
        logger.error("OpenRouter API error (%s): %s", response.status_code, response.text)
        raise WordGenerationError("Failed to generate words")
    try:
        result = response.json()
    except ValueError as exc:
        logger.error("OpenRouter returned non-JSON body: %s", response.text)
        raise WordGenerationError("Failed to generate words") from exc
    choices = result.get("choices") or [{}]
    content = ((choices[0] or {}).get("message") or {}).get("content")
    if not content:
        raise WordGenerationError("No content received from AI")
    return content


def parse_words_response(content: str, existing_words: Optional[Iterable[str]] = None) -> List[Dict[str, str]]:
    """Turn the model's reply into clean, de-duplicated word/hint pairs."""
    match = re.search(r"\{[\s\S]*\}", content)
    json_string = match.group(0) if match else content
    try:
        words_data = json.loads(json_string)
    except ValueError as exc:
        logger.warning("Failed to parse AI response: %s", content)
        raise WordGenerationError("Invalid response format from AI") from exc

    if not isinstance(words_data, dict) or not isinstance(words_data.get("words"), list):
        raise WordGenerationError("Invalid word list format")

    seen = {w.strip().lower() for w in (existing_words or []) if w}
    words = []
    for entry in words_data["words"]:
        if not isinstance(entry, dict):
            continue
        text, hint = entry.get("text"), entry.get("hint")
        if not isinstance(text, str) or not isinstance(hint, str):
            continue
        if not text.strip() or not hint.strip():
            continue
        text = text.strip().lower()
        if text in seen:
            continue
        seen.add(text)
        words.append({"text": text, "hint": sanitize_hint(text, hint.strip())})

    if not words:
        raise WordGenerationError("No valid words generated")
    return words


def generate_words(
    prompt_template: str,
    seed: Optional[int] = None,
    existing_words: Optional[Iterable[str]] = None,
    config: dict = None,
    client: Optional[httpx.Client] = None,
) -> List[Dict[str, str]]:
    """Ask the language model for a new batch of spelling words with hints."""
    if not prompt_template or not prompt_template.strip():
        raise WordGenerationError("promptTemplate is required", status_code=400)
    existing_words = list(existing_words or [])
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(prompt_template, existing_words)},
    ]
    # Lower temperature when a seed asks for reproducible batches
    temperature = 0.3 if seed else 0.7
    content = call_openrouter(messages, temperature, config=config, client=client)
    words = parse_words_response(content, existing_words)
    logger.info("Generated %d words for prompt %s", len(words), prompt_hash(prompt_template))
    return words
