"""
LLM Client

Any OpenAI-compatible chat completions API works (OpenAI, DeepSeek, ...),
so we use the openai library with a configurable base URL and model.

AI is used ONLY for turning CV text into profile fields. Its output is
untrusted and always validated before it reaches the database.
"""
from typing import Optional
from openai import AsyncOpenAI
from career_assistant.core.config import get_settings, Settings


class LLMClient:
    """
    Structured-text completion capability.
    """

    def __init__(self, settings: Settings = None):
        settings = settings or get_settings()
        self.client = AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url
        )
        self.model = settings.llm_model

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 500
    ) -> Optional[str]:
        """
        Run one chat completion and return the raw text, or None when the
        model produced no content.
        """
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            max_tokens=max_tokens,
            temperature=temperature
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


# Singleton instance
_llm_client: LLMClient = None


def get_llm_client() -> LLMClient:
    """Get or create the LLM client (singleton pattern)"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
