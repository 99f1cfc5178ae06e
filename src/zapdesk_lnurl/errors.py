"""Closed error taxonomy for Lightning Address resolution.

Every stage of a resolution either returns its value or raises one of the
``LnurlError`` subclasses below. Each error carries the structured data a UI
needs (bounds, reason, HTTP status) so callers never parse messages.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Optional, Union

import httpx
import structlog
from pydantic import ValidationError

logger = structlog.get_logger(__name__)

NETWORK = "network"

HttpStatus = Union[int, str]


class Stage(str, Enum):
    """Resolution stage names, used for diagnostics."""

    ADDRESS = "address"
    METADATA = "metadata"
    AMOUNT = "amount"
    INVOICE = "invoice"
    DESCRIPTOR = "descriptor"


class ErrorKind(str, Enum):
    ADDRESS_FORMAT = "address_format"
    METADATA_FETCH = "metadata_fetch"
    INVALID_AMOUNT = "invalid_amount"
    AMOUNT_OUT_OF_RANGE = "amount_out_of_range"
    INVALID_COMMENT = "invalid_comment"
    COMMENT_TOO_LONG = "comment_too_long"
    PROTOCOL = "protocol"
    INVOICE_FETCH = "invoice_fetch"
    INVOICE_MISSING = "invoice_missing"


class LnurlError(Exception):
    """Base exception for Lightning Address resolution errors."""

    kind: ErrorKind
    retryable: bool = False

    def __init__(self, message: str, stage: Optional[Stage] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "stage": self.stage.value if self.stage else None,
            "message": self.message,
            "retryable": self.retryable,
        }


class AddressFormatError(LnurlError):
    kind = ErrorKind.ADDRESS_FORMAT

    def __init__(self, address: Any, stage: Optional[Stage] = None):
        super().__init__(f"Invalid Lightning address format: {address!r}", stage)
        self.address = address


class FetchError(LnurlError):
    """Transport-level failure; ``status`` is the HTTP status or ``"network"``."""

    retryable = True
    _what = "request"

    def __init__(
        self,
        status: HttpStatus = NETWORK,
        detail: Optional[str] = None,
        stage: Optional[Stage] = None,
    ):
        message = f"Failed to fetch {self._what}: {status}"
        if detail:
            message += f" - {detail}"
        super().__init__(message, stage)
        self.status = status

    @property
    def status_code(self) -> Optional[int]:
        return self.status if isinstance(self.status, int) else None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status
        return data


class MetadataFetchError(FetchError):
    kind = ErrorKind.METADATA_FETCH
    _what = "LNURL metadata"


class InvoiceFetchError(FetchError):
    kind = ErrorKind.INVOICE_FETCH
    _what = "invoice"


class InvalidAmountError(LnurlError):
    kind = ErrorKind.INVALID_AMOUNT

    def __init__(self, amount: Any, stage: Optional[Stage] = None):
        super().__init__(
            f"Invalid amount: {amount!r} (must be a positive whole number of sats)",
            stage,
        )
        self.amount = amount


class AmountOutOfRangeError(LnurlError):
    kind = ErrorKind.AMOUNT_OUT_OF_RANGE

    def __init__(
        self,
        amount_sats: int,
        min_sats: int,
        max_sats: int,
        min_msat: Optional[int] = None,
        max_msat: Optional[int] = None,
        stage: Optional[Stage] = None,
    ):
        super().__init__(
            f"Amount must be between {min_sats} and {max_sats} sats "
            f"(requested {amount_sats})",
            stage,
        )
        self.amount_sats = amount_sats
        self.min_sats = min_sats
        self.max_sats = max_sats
        self.min_msat = min_msat
        self.max_msat = max_msat

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            amount_sats=self.amount_sats,
            min_sats=self.min_sats,
            max_sats=self.max_sats,
        )
        return data


class InvalidCommentError(LnurlError):
    kind = ErrorKind.INVALID_COMMENT

    def __init__(self, comment: Any, stage: Optional[Stage] = None):
        super().__init__(f"Invalid comment: {comment!r} (must be text)", stage)
        self.comment = comment


class CommentTooLongError(LnurlError):
    kind = ErrorKind.COMMENT_TOO_LONG

    def __init__(self, length: int, max_length: int, stage: Optional[Stage] = None):
        super().__init__(
            f"Comment is {length} characters, the service allows {max_length}",
            stage,
        )
        self.length = length
        self.max_length = max_length

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(length=self.length, max_length=self.max_length)
        return data


class ProtocolError(LnurlError):
    """The remote service answered with an explicit or structural error."""

    kind = ErrorKind.PROTOCOL
    DEFAULT_REASON = "LNURL service error"

    def __init__(self, reason: Optional[str] = None, stage: Optional[Stage] = None):
        self.reason = reason or self.DEFAULT_REASON
        super().__init__(self.reason, stage)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class InvoiceMissingError(LnurlError):
    kind = ErrorKind.INVOICE_MISSING

    def __init__(self, stage: Optional[Stage] = None):
        super().__init__("No payment request in callback response", stage)


class ResolutionCancelled(Exception):
    """Raised inside a resolution whose cancellation token was superseded.

    Not an ``LnurlError``: a cancelled resolution has no outcome to show.
    """

    def __init__(self, resolution_id: str):
        super().__init__(f"Resolution {resolution_id} was superseded")
        self.resolution_id = resolution_id


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

_FETCH_ERRORS: dict[Stage, type[FetchError]] = {
    Stage.METADATA: MetadataFetchError,
    Stage.INVOICE: InvoiceFetchError,
}


def _summarize_validation(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "response"
        parts.append(f"{loc}: {err.get('msg')}")
    return "Malformed LNURL response (" + "; ".join(parts) + ")"


@contextmanager
def classify(stage: Stage, log: Any = None) -> Iterator[None]:
    """Tag errors raised inside a stage and fold strays into the taxonomy."""
    log = log or logger
    try:
        yield
    except LnurlError as e:
        if e.stage is None:
            e.stage = stage
        log.warning(
            "Resolution stage failed",
            stage=stage.value,
            kind=e.kind.value,
            error=e.message,
        )
        raise
    except ValidationError as e:
        error = ProtocolError(_summarize_validation(e), stage=stage)
        log.warning(
            "Resolution stage failed",
            stage=stage.value,
            kind=error.kind.value,
            error=error.message,
        )
        raise error from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        error_cls = _FETCH_ERRORS.get(stage)
        if error_cls is None:
            raise
        error = error_cls(NETWORK, str(e), stage=stage)
        log.warning(
            "Resolution stage failed",
            stage=stage.value,
            kind=error.kind.value,
            error=error.message,
        )
        raise error from e
