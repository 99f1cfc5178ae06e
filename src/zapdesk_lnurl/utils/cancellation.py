"""Most-recent-request-wins arbitration for a single display slot.

A UI that re-resolves on every amount or address edit can otherwise show the
result of an older request that happened to finish last.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

import structlog

from ..errors import LnurlError, ResolutionCancelled

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Handed to one resolution; cancelled when a newer one supersedes it."""

    def __init__(self, resolution_id: Optional[str] = None):
        self.resolution_id = resolution_id or uuid.uuid4().hex
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise ResolutionCancelled(self.resolution_id)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"<CancellationToken {self.resolution_id} {state}>"


@dataclass(frozen=True)
class ResolutionOutcome(Generic[T]):
    """Either a value or an ``LnurlError``, never both."""

    resolution_id: str
    value: Optional[T] = None
    error: Optional[LnurlError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ResolutionSlot(Generic[T]):
    """One visible result, fed by a stream of superseding resolutions."""

    def __init__(self, on_apply: Optional[Callable[[ResolutionOutcome[T]], Any]] = None):
        self.on_apply = on_apply
        self.current: Optional[ResolutionOutcome[T]] = None
        self._token: Optional[CancellationToken] = None

    def issue(self) -> CancellationToken:
        """Cancel the in-flight resolution (if any) and hand out a new token."""
        if self._token is not None and not self._token.cancelled:
            logger.debug("Superseding resolution", resolution_id=self._token.resolution_id)
            self._token.cancel()
        self._token = CancellationToken()
        return self._token

    def is_current(self, token: CancellationToken) -> bool:
        return token is self._token and not token.cancelled

    def cancel(self) -> None:
        """Cancel the in-flight resolution without starting another."""
        if self._token is not None:
            self._token.cancel()

    async def run(
        self, resolve: Callable[[CancellationToken], Awaitable[T]]
    ) -> Optional[ResolutionOutcome[T]]:
        """Run *resolve* with a fresh token and apply its outcome if still current.

        Returns the applied outcome, or ``None`` when the resolution was
        superseded and its result (success or failure) was discarded.
        """
        token = self.issue()
        try:
            outcome = ResolutionOutcome(token.resolution_id, value=await resolve(token))
        except ResolutionCancelled:
            outcome = None
        except LnurlError as e:
            outcome = ResolutionOutcome(token.resolution_id, error=e)

        if outcome is None or not self.is_current(token):
            logger.info("Discarding superseded resolution", resolution_id=token.resolution_id)
            return None

        self.current = outcome
        if self.on_apply is not None:
            self.on_apply(outcome)
        return outcome
