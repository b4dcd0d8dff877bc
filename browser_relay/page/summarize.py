"""Language-model page analysis via the OpenAI chat completions API."""

from __future__ import annotations

import logging

from openai import AsyncOpenAI

from .prompts import ANALYSIS_SYSTEM_PROMPT, format_analysis_prompt
from .store import PageDigest

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "AI analysis unavailable: API key not set"
FAILED_MESSAGE = "AI analysis failed"


class AISummarizer:
    """Summarizes a page digest according to a free-text instruction.

    Never raises: a missing credential or a failed call yields a fixed
    advisory string instead of a model answer.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        max_tokens: int = 1000,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def summarize(self, instruction: str, digest: PageDigest) -> str:
        if not self._api_key:
            logger.warning("page analysis skipped, no API key configured")
            return UNAVAILABLE_MESSAGE

        prompt = format_analysis_prompt(digest.title, digest.url, digest.content, instruction)
        try:
            response = await self._get_client().chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self._max_tokens,
            )
            content = response.choices[0].message.content or ""
        except Exception:
            logger.warning("page analysis failed", extra={"url": digest.url}, exc_info=True)
            return FAILED_MESSAGE

        logger.info(
            "page analysis completed",
            extra={"url": digest.url, "model": self._model, "chars": len(content)},
        )
        return content
