"""
Base extractor with retry logic, rate limiting, and error handling.

Provides a foundation for the Steam API extractors: one shared HTTP client,
exponential backoff for transient failures, a streaming entry point for
large documents, and structured logging.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from game_resolver.config import RetryConfig, get_settings
from game_resolver.logger import get_logger

# Type variable for response models
T = TypeVar("T", bound=BaseModel)


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class NetworkError(ExtractionError):
    """Raised when the remote endpoint cannot be reached or answers with an error."""


class RateLimitError(NetworkError):
    """Raised when rate limit is exceeded."""


class APIError(NetworkError):
    """Raised when API returns an error response."""


class ParseError(ExtractionError):
    """Raised when a response body or record does not match the expected shape."""


class ExtractionResult(BaseModel, Generic[T]):
    """
    Wrapper for extraction results with metadata.

    Provides consistent structure for all lookup outputs,
    including timing, source tracking, and error information.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: T | None = None
    error_message: str | None = None
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str
    endpoint: str
    duration_ms: float | None = None


class BaseExtractor(ABC):
    """
    Abstract base class for all Steam extractors.

    Provides common functionality including:
    - HTTP client management
    - Retry logic with exponential backoff
    - Streaming requests for documents too large to buffer
    - Structured logging

    Subclasses must implement:
    - source_name: Identifier for the data source
    """

    def __init__(
        self,
        *,
        retry_config: RetryConfig | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            retry_config: Custom retry configuration (uses defaults if None)
            timeout: HTTP request timeout in seconds
            client: Externally owned HTTP client (closed by its owner)
        """
        settings = get_settings()
        self._retry_config = retry_config or settings.retry
        self._timeout = timeout or settings.steam.timeout_seconds
        self._logger = get_logger(
            self.__class__.__name__,
            component="extractor",
            source=self.source_name,
        )
        self._client = client
        self._owns_client = client is None

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this data source."""
        ...

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": "GameResolver/1.0",
                    "Accept": "application/json",
                    "Accept-Encoding": "gzip, deflate",
                },
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseExtractor":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _create_retry_decorator(self) -> Any:
        """Create retry decorator with current configuration."""
        return retry(
            retry=retry_if_exception_type((httpx.TransportError, APIError)),
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
                exp_base=self._retry_config.exponential_base,
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

    def _log_retry_attempt(self, retry_state: Any) -> None:
        """Log retry attempts for observability."""
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    def _decode_json(self, response: httpx.Response, endpoint: str) -> Any:
        """Decode a buffered JSON body."""
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(
                f"Response is not valid JSON: {e}",
                source=self.source_name,
                endpoint=endpoint,
                original_error=e,
            ) from e

    def _validate(self, model: type[T], raw_data: Any, endpoint: str) -> T:
        """Validate a decoded body against a response contract."""
        try:
            return model.model_validate(raw_data)
        except PydanticValidationError as e:
            raise ParseError(
                f"Response validation failed: {e}",
                source=self.source_name,
                endpoint=endpoint,
            ) from e

    def _failure(
        self,
        error: Exception | str,
        *,
        endpoint: str,
        start_time: float,
        **log_context: Any,
    ) -> ExtractionResult[Any]:
        """Log a failed lookup and wrap it in an unsuccessful result."""
        duration_ms = (time.perf_counter() - start_time) * 1000
        self._logger.error(
            "Extraction failed",
            error=str(error),
            status_code=getattr(error, "status_code", None),
            **log_context,
        )
        return ExtractionResult(
            success=False,
            error_message=str(error),
            source=self.source_name,
            endpoint=endpoint,
            duration_ms=duration_ms,
        )

    def _check_status(self, response: httpx.Response, url: str) -> None:
        """Map error status codes onto the exception hierarchy."""
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "60")
            raise RateLimitError(
                f"Rate limit exceeded. Retry after {retry_after}s",
                source=self.source_name,
                endpoint=url,
                status_code=429,
            )

        if response.status_code >= 400:
            raise APIError(
                f"API error: {response.status_code}",
                source=self.source_name,
                endpoint=url,
                status_code=response.status_code,
            )

    async def _make_request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments passed to httpx

        Returns:
            httpx.Response: Successful response

        Raises:
            RateLimitError: If rate limit exceeded
            APIError: If API keeps returning an error response
            NetworkError: If the endpoint stays unreachable
        """
        retry_decorator = self._create_retry_decorator()

        @retry_decorator
        async def _request() -> httpx.Response:
            self._logger.debug("Making request", method=method, url=url)
            response = await self.client.request(method, url, **kwargs)
            self._check_status(response, url)
            return response

        try:
            return await _request()  # type: ignore[no-any-return]
        except httpx.HTTPError as e:
            self._logger.error(
                "Request failed after retries",
                url=url,
                attempts=self._retry_config.max_attempts,
                error=str(e),
            )
            raise NetworkError(
                f"Request failed after {self._retry_config.max_attempts} attempts: {e}",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e

    @asynccontextmanager
    async def _stream_request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> AsyncIterator[httpx.Response]:
        """
        Open a streaming request; the body is read by the caller.

        A partially consumed stream cannot be replayed, so streaming requests
        are never retried here. The caller's schedule owns retries.

        Raises:
            NetworkError: If the connection fails or the status is an error
        """
        self._logger.debug("Opening stream", method=method, url=url)
        try:
            async with self.client.stream(method, url, **kwargs) as response:
                self._check_status(response, url)
                yield response
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Stream failed: {e}",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e
