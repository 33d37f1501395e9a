"""Reasoning backends and the adapter that turns evidence into a Verdict.

Four interchangeable backends share one ``generate(system, user)`` call:

    OPENAI → ANTHROPIC → GEMINI → OPENROUTER (gateway)

Exactly one is used per run: :func:`select_backend` picks the first one in
that order whose API key is configured, once, at startup. There is no
per-call failover; if the selected backend fails, the instrument gets an
ERROR verdict and the run moves on.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from market_reaction.core.config import AISettings
from market_reaction.core.errors import ConfigurationError, ResponseParseError
from market_reaction.core.http import http_post
from market_reaction.core.logger import logger
from market_reaction.models.datatypes import EventClass, Verdict
from market_reaction.pipeline.evidence import MAX_CONTEXT_CHARS
from market_reaction.pipeline.normalizer import normalize_verdict
from market_reaction.providers.base import ReasoningBackend

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"

_PROMPT_CLASSES = "|".join(c.value for c in EventClass if c is not EventClass.ERROR)


class Backend(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OPENROUTER = "openrouter"


# Priority order and the AISettings field holding each backend's key.
BACKEND_PRIORITY: List[Tuple[Backend, str]] = [
    (Backend.OPENAI, "openai_api_key"),
    (Backend.ANTHROPIC, "anthropic_api_key"),
    (Backend.GEMINI, "gemini_api_key"),
    (Backend.OPENROUTER, "openrouter_api_key"),
]


def select_backend(ai: AISettings) -> Optional[Backend]:
    """First backend in priority order with a configured key, or None."""
    for backend, key_field in BACKEND_PRIORITY:
        if getattr(ai, key_field):
            return backend
    return None


def build_system_prompt(symbol: str, pct_change: float) -> str:
    return f"""You are a professional equity markets analyst.

Explain why {symbol} moved {pct_change:.2f}% today.

If no specific company news exists:
- Explain the move using market-wide factors
- Mention profit-taking, index movement, or normal volatility
- Do NOT invent events
- Keep it factual and readable

Return STRICT JSON with exactly these two fields:
{{
  "reason_summary": "Clear 1-2 sentence explanation suitable for retail investors",
  "event_class": "{_PROMPT_CLASSES}"
}}
"""


def build_user_message(context: str) -> str:
    return f"CONTEXT:\n{context[:MAX_CONTEXT_CHARS]}"


# ── Backends ──────────────────────────────────────────────────────────────────

class OpenAIBackend(ReasoningBackend):
    """OpenAI chat completions in JSON-object mode."""

    name = Backend.OPENAI.value

    def __init__(self, api_key: str, model: str, timeout: float = 60.0) -> None:
        import openai

        self.model = model
        self._client = openai.OpenAI(api_key=api_key, timeout=timeout)

    def generate(self, system: str, user: str) -> str:
        completion = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            response_format={"type": "json_object"},
        )
        return completion.choices[0].message.content or ""


class AnthropicBackend(ReasoningBackend):
    """Anthropic Messages API."""

    name = Backend.ANTHROPIC.value

    def __init__(self, api_key: str, model: str, timeout: float = 60.0, max_tokens: int = 1000) -> None:
        import anthropic

        self.model = model
        self.max_tokens = max_tokens
        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout)

    def generate(self, system: str, user: str) -> str:
        message = self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            messages=[{"role": "user", "content": user}],
        )
        for block in message.content:
            text = getattr(block, "text", None)
            if text:
                return text
        return ""


class GeminiBackend(ReasoningBackend):
    """Google Gemini via the google-genai SDK."""

    name = Backend.GEMINI.value

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = 60.0,
        temperature: float = 0.2,
        max_output_tokens: int = 512,
    ) -> None:
        from google import genai
        from google.genai import types

        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._types = types
        # google-genai takes the deadline in milliseconds
        self._client = genai.Client(
            api_key=api_key, http_options=types.HttpOptions(timeout=int(timeout * 1000))
        )

    def generate(self, system: str, user: str) -> str:
        config = self._types.GenerateContentConfig(
            system_instruction=system,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        response = self._client.models.generate_content(
            model=self.model, contents=user, config=config
        )
        return response.text or ""


class OpenRouterBackend(ReasoningBackend):
    """OpenAI-compatible gateway reached over plain HTTP."""

    name = Backend.OPENROUTER.value

    def __init__(self, api_key: str, model: str, timeout: float = 60.0, url: str = OPENROUTER_URL) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.url = url

    def generate(self, system: str, user: str) -> str:
        resp = http_post(
            self.url,
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        payload: Dict[str, Any] = resp.json()
        choices = payload.get("choices") or []
        if not choices:
            return "{}"
        return (choices[0].get("message") or {}).get("content") or "{}"


def build_backend(ai: AISettings, timeout: float = 60.0) -> ReasoningBackend:
    """Instantiate the one backend selected for this run.

    Raises:
        ConfigurationError: If no backend key is configured.
    """
    backend = select_backend(ai)
    if backend is None:
        raise ConfigurationError("No AI API key configured for any reasoning backend.")

    logger.info(f"Reasoning backend selected: {backend.value}")
    if backend is Backend.OPENAI:
        return OpenAIBackend(ai.openai_api_key, ai.openai_model, timeout=timeout)
    if backend is Backend.ANTHROPIC:
        return AnthropicBackend(ai.anthropic_api_key, ai.anthropic_model, timeout=timeout)
    if backend is Backend.GEMINI:
        return GeminiBackend(ai.gemini_api_key, ai.gemini_model, timeout=timeout)
    return OpenRouterBackend(ai.openrouter_api_key, ai.openrouter_model, timeout=timeout)


# ── Adapter ───────────────────────────────────────────────────────────────────

class ReasoningAdapter:
    """Ask the selected backend to explain a move and normalise its answer.

    Args:
        backend: The backend chosen for this run by :func:`build_backend`.
    """

    def __init__(self, backend: ReasoningBackend) -> None:
        self.backend = backend

    def analyze(self, symbol: str, pct_change: float, context: str) -> Verdict:
        """Return a Verdict for the move; backend and parse failures become ERROR verdicts."""
        system = build_system_prompt(symbol, pct_change)
        user = build_user_message(context)

        try:
            raw = self.backend.generate(system, user)
            return normalize_verdict(raw)
        except ResponseParseError as exc:
            logger.error(f"ReasoningAdapter: analysis abandoned for {symbol} ({self.backend.name}): {exc}")
            return Verdict.error(str(exc))
        except Exception as exc:
            logger.error(f"ReasoningAdapter: AI analysis failed for {symbol} ({self.backend.name}): {exc}")
            return Verdict.error(str(exc))
