"""
Text-model client used by the profile mapper.

The mapper only depends on the CompletionClient contract: a `model`
attribute and `complete(messages) -> str`. OpenAICompletionClient is the
production implementation.
"""

import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from dotenv import load_dotenv
from openai import OpenAI, OpenAIError

from palate.config import OPENAI_MAX_TOKENS, OPENAI_MODEL, OPENAI_TEMPERATURE
from palate.error_handling import LLMError, handle_llm_error
from palate.utils import logger


class CompletionClient(ABC):
    """Contract for the text-generation collaborator."""

    model: str = "unknown"

    @abstractmethod
    def complete(self, messages: List[Dict[str, str]]) -> str:
        """Send chat messages, return the raw text of the reply."""
        pass


class OpenAICompletionClient(CompletionClient):
    """
    OpenAI chat-completions client.

    One request per call: no retries here, failures surface as LLMError and
    the caller decides whether to retry the whole mapping.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = OPENAI_TEMPERATURE,
        max_tokens: int = OPENAI_MAX_TOKENS
    ):
        """
        Initialize the client.

        Args:
            api_key: OpenAI key. If None, read OPENAI_API_KEY from the environment/.env
            model: Model name. If None, read OPENAI_MODEL or use the configured default
            temperature: Sampling temperature
            max_tokens: Output token budget

        Raises:
            LLMError: If no API key is available
        """
        load_dotenv()

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise LLMError("OPENAI_API_KEY not found in environment variables")

        self.client = OpenAI(api_key=api_key)
        self.model = model or os.getenv("OPENAI_MODEL", OPENAI_MODEL)
        self.temperature = temperature
        self.max_tokens = max_tokens

    def complete(self, messages: List[Dict[str, str]]) -> str:
        """
        Request a JSON-object completion.

        Raises:
            LLMError: On API failure or an empty reply
        """
        try:
            logger.debug(f"Calling OpenAI API ({self.model})...")
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"}
            )
        except OpenAIError as e:
            handle_llm_error(e, "profile mapping")

        if getattr(completion, 'usage', None):
            logger.debug(f"Mapping used {completion.usage.total_tokens} tokens")

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            logger.error(f"Empty completion from {self.model}")
            raise LLMError(f"Empty completion from {self.model}")

        return content
