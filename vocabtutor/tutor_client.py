"""Anthropic Messages API client for tutor lookups."""

from pathlib import Path

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

import config
from vocabtutor.input_classifier import InputType, analyze_input, strip_prefix
from vocabtutor.logger import get_logger


class TutorError(Exception):
    """Raised when a tutor request fails."""

    pass


class TutorTimeoutError(TutorError):
    """Raised when the tutor request times out."""

    pass


class TutorResponseError(TutorError):
    """Raised when the tutor response has an unexpected shape."""

    pass


PROMPT_FILES: dict[InputType, Path] = {
    InputType.GERMAN_WORD: config.GERMAN_WORD_PROMPT,
    InputType.RUSSIAN_WORD: config.RUSSIAN_WORD_PROMPT,
    InputType.GERMAN_SENTENCE: config.GERMAN_SENTENCE_PROMPT,
    InputType.RUSSIAN_SENTENCE: config.RUSSIAN_SENTENCE_PROMPT,
    InputType.EXPLANATION: config.EXPLANATION_PROMPT,
    InputType.GRAMMAR_CHECK: config.GRAMMAR_CHECK_PROMPT,
    InputType.FREEFORM: config.FREEFORM_PROMPT,
    InputType.SIMPLIFY: config.SIMPLIFY_PROMPT,
}


def load_prompt_template(path: Path) -> str:
    """Load a prompt template from file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip()


def build_prompt(text: str, context: str | None = None) -> str:
    """
    Assemble the full prompt for a user query.

    Args:
        text: Raw user message
        context: Headword of the message being replied to, if any

    Returns:
        Prompt text to send as the single user message
    """
    if context:
        template = load_prompt_template(config.CONTEXT_PROMPT)
        return f"{template.format(context=context)}\n\n{text.strip()}"

    input_type = analyze_input(text)
    template = load_prompt_template(PROMPT_FILES[input_type])
    return f"{template}\n\n{strip_prefix(text)}"


def extract_text(data: dict) -> str:
    """
    Pull the text out of a Messages API response body.

    Raises:
        TutorResponseError: If no text block is present
    """
    blocks = data.get("content") if isinstance(data, dict) else None
    if not blocks:
        raise TutorResponseError(f"Tutor response has no content: {str(data)[:500]}")
    texts = [b.get("text", "") for b in blocks if b.get("type", "text") == "text"]
    if not texts:
        raise TutorResponseError("Tutor response has no text block")
    return "".join(texts)


def is_retryable(exc: BaseException) -> bool:
    """True for timeouts, 429 and 5xx responses."""
    if isinstance(exc, TutorTimeoutError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


@retry(
    stop=stop_after_attempt(config.TUTOR_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception(is_retryable),
    reraise=True,
)
async def ask_tutor(prompt: str, client: httpx.AsyncClient) -> str:
    """
    Send a prompt to the tutor model.

    Args:
        prompt: Full prompt text
        client: Async HTTP client

    Returns:
        The tutor's reply text

    Raises:
        TutorTimeoutError: If the request times out
        TutorResponseError: If the response cannot be interpreted
        httpx.HTTPStatusError: On non-2xx responses (429 and 5xx after retries)
    """
    payload = {
        "model": config.TUTOR_MODEL,
        "max_tokens": config.TUTOR_MAX_TOKENS,
        "messages": [{"role": "user", "content": prompt}],
    }
    headers = {
        "x-api-key": config.ANTHROPIC_API_KEY,
        "anthropic-version": config.ANTHROPIC_API_VERSION,
        "content-type": "application/json",
    }

    try:
        response = await client.post(
            config.ANTHROPIC_API_URL,
            json=payload,
            headers=headers,
            timeout=config.TUTOR_TIMEOUT,
        )
    except httpx.TimeoutException as e:
        raise TutorTimeoutError(f"Tutor request timed out after {config.TUTOR_TIMEOUT}s") from e

    if response.status_code >= 400:
        get_logger().warning(f"Tutor API returned {response.status_code}")
    response.raise_for_status()

    try:
        data = response.json()
    except ValueError as e:
        raise TutorResponseError(f"Tutor response is not JSON: {e}") from e

    return extract_text(data)
