from tafa.providers.base import BaseProvider
from tafa.providers.gemini_provider import GeminiProvider
from tafa.providers.groq_provider import GroqProvider

PROVIDERS = {
    "gemini": GeminiProvider,
    "groq": GroqProvider,
}

__all__ = [
    "BaseProvider",
    "GeminiProvider",
    "GroqProvider",
    "PROVIDERS",
]
