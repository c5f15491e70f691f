"""
LLM Provider Abstraction Layer

Thin async wrapper around LiteLLM so the digest generator does not depend on
a specific vendor SDK. Defaults to Gemini, any LiteLLM model id works.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
from dataclasses import dataclass
from typing import Any

# Third-party imports
import litellm
from litellm import acompletion

# Local application imports
import constants as const


logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.set_verbose = False  # Set to True for debugging


@dataclass(frozen=True)
class BackendConfig:
    """Generation backend settings for one pipeline run"""
    model: str = const.LLM_MODEL
    api_key: str | None = const.LLM_API_KEY  # None lets LiteLLM read provider env vars


class LLMProvider:
    """
    Unified LLM provider using LiteLLM.

    Errors from the backend are logged and re-raised unchanged so callers can
    classify them (e.g. overloaded vs. invalid request).
    """

    def __init__(self, config: BackendConfig | None = None):
        """
        Initialize LLM provider.

        Args:
            config: Backend settings (defaults to values from the environment)
        """
        self.config = config if config else BackendConfig()
        self.litellm_model = self.config.model
        logger.debug(f"LLM Provider initialized: litellm_model={self.litellm_model}")

    async def acompletion(self, messages: list[dict[str, Any]]) -> Any:
        """
        Async completion call using LiteLLM.

        Args:
            messages: Conversation messages in OpenAI format

        Returns:
            LiteLLM completion response
        """
        params: dict[str, Any] = {"model": self.litellm_model, "messages": messages}
        if self.config.api_key:
            params["api_key"] = self.config.api_key

        logger.info(f"LLM request: model={self.litellm_model}, messages={len(messages)}")

        try:
            response = await acompletion(**params)
        except Exception as e:
            logger.error(f"Error in LLM completion: {e}")
            raise

        logger.info(f"LLM response received: finish_reason={response.choices[0].finish_reason}")
        return response

    async def complete_text(self, prompt: str) -> str:
        """
        Send a single user prompt and return the response text.

        Args:
            prompt: User prompt

        Returns:
            Response text (empty string if the model returned no content)
        """
        response = await self.acompletion([{"role": "user", "content": prompt}])
        return response.choices[0].message.content or ""
