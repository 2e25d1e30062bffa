"""
HTTP client for the remote suggestion service.

This module provides the SuggestionClient class that requests suggestions
from a chat completion API (Azure OpenAI, OpenAI or Anthropic). Blocking
HTTP calls run in the default executor so the event loop is never blocked.
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from suggestion_engine.clients.prompts import Prompt, PromptBuilder, PROMPT_STYLE_QUESTIONS
from suggestion_engine.clients.rate_limiter import RequestRateLimiter
from suggestion_engine.clients.response_parser import SuggestionResponseParser
from suggestion_engine.config import Settings
from suggestion_engine.exceptions import (
    RateLimitExceededError,
    ResponseParseError,
    ServiceNotConfiguredError,
    SuggestionNetworkError,
    SuggestionServiceError,
    SuggestionTimeoutError
)

logger = logging.getLogger(__name__)

OPENAI_DEFAULT_URL = 'https://api.openai.com/v1/chat/completions'
ANTHROPIC_DEFAULT_URL = 'https://api.anthropic.com/v1/messages'
ANTHROPIC_VERSION = '2023-06-01'


class SuggestionClient:
    """
    Async client for a chat completion suggestion service.

    Supported providers:
    - azure: Azure OpenAI deployment, authenticated with the api-key header
    - openai: OpenAI chat completions, authenticated with a bearer token
    - anthropic: Anthropic messages API, authenticated with x-api-key

    Every failure is raised as a SuggestionGenerationError subclass.

    Attributes:
        provider: Service provider name
        request_timeout: Per-request timeout in seconds
        rate_limiter: Local sliding window request limiter
    """

    def __init__(
        self,
        provider: str = 'azure',
        api_key: str = '',
        endpoint: str = '',
        model: str = 'gpt-4o-mini',
        deployment: str = '',
        api_version: str = '2024-12-01-preview',
        max_tokens: int = 50,
        temperature: float = 0.7,
        request_timeout: float = 10.0,
        prompt_style: str = PROMPT_STYLE_QUESTIONS,
        rate_limiter: Optional[RequestRateLimiter] = None,
        http_session: Optional[requests.Session] = None
    ):
        """
        Initialize suggestion client.

        Args:
            provider: 'azure', 'openai' or 'anthropic'
            api_key: Service API key
            endpoint: Base endpoint (required for azure, optional override otherwise)
            model: Model name (openai and anthropic)
            deployment: Deployment name (azure)
            api_version: API version query parameter (azure)
            max_tokens: Completion token limit
            temperature: Sampling temperature
            request_timeout: Per-request timeout in seconds
            prompt_style: 'questions', 'conversational' or 'professional'
            rate_limiter: Optional rate limiter (default: 30 requests per minute)
            http_session: Optional requests session for testing
        """
        self.provider = provider
        self.api_key = api_key
        self.endpoint = endpoint
        self.model = model
        self.deployment = deployment
        self.api_version = api_version
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.request_timeout = request_timeout

        self.prompt_builder = PromptBuilder(prompt_style)
        self.parser = SuggestionResponseParser()
        self.rate_limiter = rate_limiter or RequestRateLimiter()
        self.http = http_session or requests.Session()

        logger.info(
            f"SuggestionClient initialized with provider={provider}, "
            f"style={prompt_style}, timeout={request_timeout}s"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> 'SuggestionClient':
        """
        Create a client from environment settings.

        Args:
            settings: Loaded Settings

        Returns:
            Configured SuggestionClient
        """
        return cls(
            provider=settings.provider,
            api_key=settings.api_key,
            endpoint=settings.endpoint,
            model=settings.model,
            deployment=settings.deployment,
            api_version=settings.api_version,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            request_timeout=settings.request_timeout,
            prompt_style=settings.prompt_style,
            rate_limiter=RequestRateLimiter(
                max_requests=settings.max_requests_per_minute
            )
        )

    @property
    def is_configured(self) -> bool:
        """Whether the credentials required by the provider are present."""
        if not self.api_key:
            return False

        if self.provider == 'azure':
            return bool(self.endpoint and self.deployment)

        return True

    async def generate(self, text: str) -> List[str]:
        """
        Request suggestions for a transcript text.

        Args:
            text: Transcript text the speaker paused on

        Returns:
            Non-empty list of at most 5 suggestions

        Raises:
            ServiceNotConfiguredError: If credentials are missing
            RateLimitExceededError: If the local rate limit is exhausted
            SuggestionTimeoutError: If the request times out
            SuggestionNetworkError: If the service cannot be reached
            SuggestionServiceError: If the service returns a non-2xx status
            ResponseParseError: If the response has no usable suggestions
        """
        if not self.is_configured:
            raise ServiceNotConfiguredError(
                f"Suggestion service '{self.provider}' is not configured"
            )

        if not self.rate_limiter.try_acquire():
            raise RateLimitExceededError(
                f"Rate limit of {self.rate_limiter.max_requests} requests per "
                f"{self.rate_limiter.window_seconds:.0f}s exceeded"
            )

        prompt = self.prompt_builder.build(text)
        url = self._build_url()
        headers = self._build_headers()
        body = self._build_body(prompt)

        # Run blocking HTTP call in executor to avoid blocking the loop
        loop = asyncio.get_running_loop()
        start_time = time.perf_counter()

        payload = await loop.run_in_executor(
            None,
            lambda: self._post(url, headers, body)
        )

        suggestions = self.parser.parse(payload)

        logger.debug(json.dumps({
            'event': 'suggestions_generated',
            'provider': self.provider,
            'count': len(suggestions),
            'duration_ms': round((time.perf_counter() - start_time) * 1000, 1)
        }))

        return suggestions

    async def test_connection(self) -> Dict[str, Any]:
        """
        Send a test request to verify the configuration.

        Never raises.

        Returns:
            Dictionary with 'success' and either 'suggestions' or 'error'
        """
        try:
            suggestions = await self.generate("I'm testing the connection")
            return {'success': True, 'suggestions': suggestions}
        except Exception as e:
            logger.warning(f"Suggestion service connection test failed: {e}")
            return {'success': False, 'error': str(e)}

    def _post(self, url: str, headers: Dict[str, str], body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.http.post(
                url,
                headers=headers,
                json=body,
                timeout=self.request_timeout
            )
        except requests.Timeout as e:
            raise SuggestionTimeoutError(
                f"Suggestion request timed out after {self.request_timeout}s"
            ) from e
        except requests.ConnectionError as e:
            raise SuggestionNetworkError(f"Could not reach suggestion service: {e}") from e
        except requests.RequestException as e:
            raise SuggestionNetworkError(f"Suggestion request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise SuggestionServiceError(
                f"Suggestion service returned HTTP {response.status_code}: "
                f"{response.text[:200]}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"Response is not valid JSON: {e}") from e

    def _build_url(self) -> str:
        if self.provider == 'azure':
            endpoint = self.endpoint if self.endpoint.endswith('/') else self.endpoint + '/'
            return (
                f"{endpoint}openai/deployments/{self.deployment}"
                f"/chat/completions?api-version={self.api_version}"
            )

        if self.provider == 'anthropic':
            return self.endpoint or ANTHROPIC_DEFAULT_URL

        return self.endpoint or OPENAI_DEFAULT_URL

    def _build_headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}

        if self.provider == 'azure':
            headers['api-key'] = self.api_key
        elif self.provider == 'anthropic':
            headers['x-api-key'] = self.api_key
            headers['anthropic-version'] = ANTHROPIC_VERSION
        else:
            headers['Authorization'] = f"Bearer {self.api_key}"

        return headers

    def _build_body(self, prompt: Prompt) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            'max_tokens': self.max_tokens,
            'temperature': self.temperature
        }

        if self.provider == 'anthropic':
            body['model'] = self.model
            body['messages'] = [{'role': 'user', 'content': prompt.user}]
            if prompt.system:
                body['system'] = prompt.system
            return body

        body['messages'] = prompt.to_messages()
        if self.provider == 'openai':
            body['model'] = self.model

        return body
