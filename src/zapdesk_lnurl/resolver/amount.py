"""Amount and comment checks against a pay service's advertised limits."""

from numbers import Integral, Real
from typing import Any, Optional

from ..errors import (
    AmountOutOfRangeError,
    CommentTooLongError,
    InvalidAmountError,
    InvalidCommentError,
)
from ..models.schemas import AmountRequest, PayServiceDescriptor

MSAT_PER_SAT = 1000


def sats_to_msats(amount_sats: int) -> int:
    return amount_sats * MSAT_PER_SAT


def coerce_amount(value: Any) -> int:
    """Turn caller input into a positive whole number of sats.

    Accepts ints, integral floats and decimal digit strings. Everything else,
    including zero and negatives, raises ``InvalidAmountError``.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(value)

    if isinstance(value, Integral):
        amount = int(value)
    elif isinstance(value, Real):
        if not float(value).is_integer():
            raise InvalidAmountError(value)
        amount = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        amount = int(value.strip())
    else:
        raise InvalidAmountError(value)

    if amount <= 0:
        raise InvalidAmountError(value)
    return amount


def coerce_comment(value: Any) -> Optional[str]:
    """Normalize an optional comment; empty means none, non-text is rejected."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidCommentError(value)
    return value or None


def support_comment(request_id: Any, comment_allowed: int) -> Optional[str]:
    """Default comment tying a tip to its support request.

    ``None`` when the service takes no comment or the text would not fit.
    """
    comment = f"Tip for support request #{request_id}"
    if comment_allowed <= 0 or len(comment) > comment_allowed:
        return None
    return comment


def validate_amount(amount_sats: Any, descriptor: PayServiceDescriptor) -> None:
    """Check *amount_sats* against ``[minSendable, maxSendable]`` inclusive."""
    if (
        isinstance(amount_sats, bool)
        or not isinstance(amount_sats, Integral)
        or amount_sats < 0
    ):
        raise InvalidAmountError(amount_sats)

    amount_msat = sats_to_msats(int(amount_sats))
    if (
        amount_msat == 0
        or amount_msat < descriptor.min_sendable_msat
        or amount_msat > descriptor.max_sendable_msat
    ):
        raise AmountOutOfRangeError(
            int(amount_sats),
            min_sats=descriptor.min_sendable_sats,
            max_sats=descriptor.max_sendable_sats,
            min_msat=descriptor.min_sendable_msat,
            max_msat=descriptor.max_sendable_msat,
        )


def validate_comment(comment: Optional[str], descriptor: PayServiceDescriptor) -> None:
    """Reject a comment the service would refuse.

    A comment sent to a service with ``commentAllowed == 0`` is dropped by the
    invoice request rather than rejected here.
    """
    if not comment or descriptor.comment_allowed <= 0:
        return
    if len(comment) > descriptor.comment_allowed:
        raise CommentTooLongError(len(comment), descriptor.comment_allowed)


def validate_request(request: AmountRequest, descriptor: PayServiceDescriptor) -> None:
    validate_amount(request.amount_sats, descriptor)
    validate_comment(request.comment, descriptor)
