"""Text completion client backed by the OpenAI SDK."""

from __future__ import annotations

import logging
from typing import Optional

from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo-instruct"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 1.0


class CompletionClient:
    def __init__(self, api_key: str | None, model: str = DEFAULT_MODEL) -> None:
        self.client = OpenAI(api_key=api_key)
        self.model = model

    def complete(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float = DEFAULT_TEMPERATURE,
        top_p: float = DEFAULT_TOP_P,
    ) -> Optional[str]:
        """Return the first completion's text, trimmed, or None when nothing came back."""
        response = self.client.completions.create(
            model=self.model,
            prompt=prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            top_p=top_p,
        )
        if not response.choices:
            logger.debug("Completion returned no choices for prompt of %d chars", len(prompt))
            return None
        text = response.choices[0].text
        return text.strip() if text is not None else None
