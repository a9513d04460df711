"""
llm_gateway.py — One-shot text generation
Sends a single prompt to the configured provider and hands back a tagged
LLMResult. No retries, no provider fallback, no streaming.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from tafa.config import GEMINI_API_KEY, GROQ_API_KEY, LLM_PROVIDER
from tafa.providers import PROVIDERS, BaseProvider

logger = logging.getLogger(__name__)

_PROVIDER_KEYS = {
    "gemini": GEMINI_API_KEY,
    "groq": GROQ_API_KEY,
}


@dataclass(frozen=True)
class LLMResult:
    ok: bool
    text: Optional[str] = None
    error: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    response_time: float = 0.0

    @classmethod
    def success(cls, text: str, **meta) -> "LLMResult":
        return cls(ok=True, text=text, **meta)

    @classmethod
    def failure(cls, reason: str, **meta) -> "LLMResult":
        return cls(ok=False, error=reason, **meta)


class LLMGateway:
    """Route a prompt to one text-generation provider."""

    def __init__(self, provider: Optional[BaseProvider] = None, model: Optional[str] = None):
        self.provider = provider
        self.model = model

    async def generate(self, prompt: str, max_tokens: int = 1000, system: Optional[str] = None) -> LLMResult:
        if self.provider is None:
            logger.error("No LLM provider configured")
            return LLMResult.failure("No LLM provider configured")

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        t0 = time.time()
        try:
            result = await self.provider.chat(messages, self.model, max_tokens=max_tokens)
        except Exception as exc:
            logger.error(f"{self.provider.name} request failed: {exc}")
            return LLMResult.failure(f"{self.provider.name}: {exc}", provider=self.provider.name)
        elapsed = round(time.time() - t0, 3)

        meta = {"provider": result.get("provider", self.provider.name), "model": result.get("model"),
                "response_time": elapsed}
        if result.get("status") != "success":
            error = result.get("error") or f"{self.provider.name} returned an error"
            logger.error(f"{self.provider.name} returned an error: {error}")
            return LLMResult.failure(error, **meta)

        text = result.get("text")
        if not text:
            logger.error(f"{self.provider.name} returned an empty response")
            return LLMResult.failure("Empty response", **meta)
        return LLMResult.success(text, **meta)


def build_provider(name: str = LLM_PROVIDER) -> Optional[BaseProvider]:
    provider_class = PROVIDERS.get(name)
    if provider_class is None:
        logger.warning(f"Unknown LLM provider '{name}'")
        return None
    api_key = _PROVIDER_KEYS.get(name, "")
    if not api_key:
        logger.warning(f"No API key configured for LLM provider '{name}'")
        return None
    return provider_class(api_key=api_key)


_gateway_instance = None


def get_llm_gateway() -> LLMGateway:
    global _gateway_instance
    if _gateway_instance is None:
        _gateway_instance = LLMGateway(provider=build_provider())
    return _gateway_instance
