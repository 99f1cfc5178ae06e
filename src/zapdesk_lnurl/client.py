"""Async HTTP client for LNURL endpoints."""

import asyncio
from datetime import timedelta
from typing import Any, Optional, Type

import httpx
import structlog
from pydantic import Field
from pydantic_settings import BaseSettings

from .errors import NETWORK, FetchError

logger = structlog.get_logger(__name__)


class LnurlConfig(BaseSettings):
    """Configuration for Lightning Address resolution."""

    timeout: float = Field(
        default=10.0, gt=0, description="Per-request timeout in seconds"
    )
    validity_window_seconds: int = Field(
        default=3600,
        ge=1,
        description="Display validity of a payment descriptor in seconds",
    )
    max_concurrent_requests: int = Field(
        default=10, ge=1, description="Maximum simultaneous outbound requests"
    )
    user_agent: str = Field(
        default="zapdesk-lnurl/0.1", description="User-Agent sent to LNURL services"
    )
    default_label: str = Field(
        default="support agent",
        description="Recipient label used when the caller supplies none",
    )
    log_level: str = Field(default="INFO", description="Host process log level")

    model_config = {"env_prefix": "ZAPDESK_LNURL_", "case_sensitive": False}

    @property
    def validity_window(self) -> timedelta:
        return timedelta(seconds=self.validity_window_seconds)


class LnurlClient:
    """Asynchronous JSON-over-HTTPS client shared by the resolution stages."""

    def __init__(self, config: Optional[LnurlConfig] = None):
        self.config = config or LnurlConfig()
        self.client: Optional[httpx.AsyncClient] = None
        self._limiter = asyncio.Semaphore(self.config.max_concurrent_requests)

    async def __aenter__(self):
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def _ensure_client(self):
        if not self.client:
            self.client = httpx.AsyncClient(
                timeout=self.config.timeout,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self.config.user_agent,
                },
                follow_redirects=True,
            )

    async def aclose(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def get_json(
        self,
        url: str,
        *,
        error_cls: Type[FetchError],
        log: Any = None,
    ) -> Any:
        """GET *url* and return the decoded JSON body.

        Unbuildable URLs, transport failures, timeouts, non-2xx responses and
        bodies that are not JSON raise *error_cls* with the HTTP status, or ``"network"``
        when no response arrived.
        """
        await self._ensure_client()
        log = (log or logger).bind(endpoint=url.split("?", 1)[0])

        async with self._limiter:
            try:
                response = await asyncio.wait_for(
                    self.client.get(url),
                    timeout=self.config.timeout,
                )
            except asyncio.TimeoutError:
                log.error("Request timed out", timeout=self.config.timeout)
                raise error_cls(NETWORK, f"timed out after {self.config.timeout}s")
            except (httpx.RequestError, httpx.InvalidURL) as e:
                log.error("Request error", error=str(e))
                raise error_cls(NETWORK, str(e))

        log.info("LNURL request", status_code=response.status_code)

        if not response.is_success:
            raise error_cls(response.status_code)

        try:
            return response.json()
        except ValueError:
            log.error(
                "Response is not JSON",
                status_code=response.status_code,
            )
            raise error_cls(response.status_code, "response body is not JSON")
