import httpx

from tafa.config import GROQ_MODEL, LLM_TIMEOUT_SECONDS
from tafa.providers.base import BaseProvider


class GroqProvider(BaseProvider):
    """Provider for Groq's OpenAI-compatible inference API using httpx."""

    endpoint = "https://api.groq.com/openai/v1/chat/completions"

    def __init__(self, api_key: str, default_model: str = GROQ_MODEL, timeout: float = LLM_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.default_model = default_model
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "groq"

    async def chat(self, messages: list[dict], model: str | None = None, max_tokens: int = 1024) -> dict:
        used_model = model or self.default_model
        try:
            headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            }
            body = {
                "model": used_model,
                "messages": messages,
                "max_tokens": max_tokens,
            }

            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                data = response.json()
                text = data["choices"][0]["message"]["content"] if data.get("choices") else None

            return self._success(used_model, text)
        except httpx.TimeoutException:
            return self._failed(used_model, "Timeout")
        except Exception as e:
            return self._failed(used_model, str(e))
