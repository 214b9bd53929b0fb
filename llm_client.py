"""
LLM client abstraction for the external scoring oracle.

The rest of the application only calls ``chat_json``: one system prompt, one
user prompt, one JSON object back. Any transport error, empty reply or
non-JSON reply is raised as UpstreamServiceError; there is no retry.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from openai import OpenAI, OpenAIError

from exceptions import UpstreamServiceError
from metrics import app_metrics

logger = logging.getLogger('llm')


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def chat_json(self, system_prompt: str, user_prompt: str, operation: str = 'chat',
                  temperature: Optional[float] = None) -> Dict[str, Any]:
        """Send one request and return the decoded JSON object."""


class OpenAIClient(LLMClient):
    """OpenAI (or OpenAI-compatible server) client implementation."""

    def __init__(self, api_key: Optional[str] = None, model: str = 'gpt-4o-mini', base_url: Optional[str] = None,
                 temperature: float = 0.2, max_tokens: int = 2048, timeout: float = 30):
        if not api_key:
            raise ValueError("OpenAI API key is required. Set OPENAI_API_KEY environment variable.")

        # max_retries=0: a failed call fails the request
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def chat_json(self, system_prompt: str, user_prompt: str, operation: str = 'chat',
                  temperature: Optional[float] = None) -> Dict[str, Any]:
        start_time = time.time()
        status = 'error'
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=self.max_tokens,
            )
            result = parse_json_reply(response.choices[0].message.content)
            status = 'success'
            return result

        except OpenAIError as e:
            logger.error(f"LLM request failed for {operation}: {type(e).__name__}: {e}")
            raise UpstreamServiceError("Failed to get analysis from LLM.") from e

        finally:
            duration = time.time() - start_time
            app_metrics.record_llm_request(operation, status, duration)
            logger.info(f"LLM {operation} finished with status={status} in {duration:.2f}s")


def parse_json_reply(content: Optional[str]) -> Dict[str, Any]:
    """Decode a model reply that must be a single JSON object."""
    if not content:
        raise UpstreamServiceError("LLM returned no content.")
    try:
        result = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"LLM returned unparsable JSON: {e}")
        raise UpstreamServiceError("LLM returned unparsable content.") from e
    if not isinstance(result, dict):
        raise UpstreamServiceError("LLM returned unexpected content.")
    return result


def get_llm_client(config) -> LLMClient:
    """Factory function to get the appropriate LLM client based on configuration."""
    provider = config.get('LLM_PROVIDER', 'openai')

    if provider == 'openai':
        return OpenAIClient(
            api_key=config.get('OPENAI_API_KEY', None),
            model=config.get('LLM_MODEL', 'gpt-4o-mini'),
            base_url=config.get('OPENAI_BASE_URL', None),
            temperature=config.get('LLM_TEMPERATURE', 0.2),
            max_tokens=config.get('LLM_MAX_TOKENS', 2048),
            timeout=config.get('LLM_TIMEOUT', 30),
        )
    raise ValueError(f"Unsupported LLM provider: {provider}")
