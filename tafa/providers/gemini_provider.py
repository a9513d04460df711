import asyncio

from tafa.config import GEMINI_MODEL, LLM_TIMEOUT_SECONDS
from tafa.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    """Provider for Google Gemini API using the official SDK."""

    def __init__(self, api_key: str, default_model: str = GEMINI_MODEL, timeout: float = LLM_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.default_model = default_model
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "gemini"

    async def chat(self, messages: list[dict], model: str | None = None, max_tokens: int = 1024) -> dict:
        used_model = model or self.default_model
        try:
            import google.generativeai as genai
            # SDK configuration is module-global; set it before every call
            genai.configure(api_key=self.api_key)

            system_instruction = None
            history = []
            for msg in messages:
                if msg["role"] == "system":
                    system_instruction = msg["content"]
                elif msg["role"] == "user":
                    history.append({"role": "user", "parts": [msg["content"]]})
                elif msg["role"] == "assistant":
                    history.append({"role": "model", "parts": [msg["content"]]})

            last_message = ""
            if history and history[-1]["role"] == "user":
                last_message = history[-1]["parts"][0]
                history = history[:-1]

            g_model = genai.GenerativeModel(
                model_name=used_model,
                system_instruction=system_instruction,
                generation_config={"max_output_tokens": max_tokens},
            )
            chat_session = g_model.start_chat(history=history)
            response = await asyncio.wait_for(
                chat_session.send_message_async(content=last_message),
                timeout=self.timeout,
            )
            return self._success(used_model, response.text)
        except asyncio.TimeoutError:
            return self._failed(used_model, "Timeout")
        except Exception as e:
            return self._failed(used_model, str(e))
