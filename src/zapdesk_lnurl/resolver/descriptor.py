"""Assemble the final, immutable payment descriptor."""

from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

import bolt11
import structlog

from ..client import LnurlConfig
from ..models.schemas import (
    InvoiceResult,
    PaymentDescriptor,
    PaymentHashSource,
    PaymentStatus,
)

logger = structlog.get_logger(__name__)

_FIELDS = LnurlConfig.model_fields
DEFAULT_LABEL: str = _FIELDS["default_label"].default
DEFAULT_VALIDITY_WINDOW = timedelta(seconds=_FIELDS["validity_window_seconds"].default)


def derive_payment_hash(payment_request: str) -> tuple[str, PaymentHashSource]:
    """Return the invoice's payment hash, or a sha256 placeholder.

    The placeholder only gives the UI a stable identifier; it must not be used
    to look up or verify a payment.
    """
    try:
        payment_hash = bolt11.decode(payment_request).payment_hash
    except Exception as e:
        logger.debug("Invoice did not decode as BOLT11", error=str(e))
        payment_hash = None

    if payment_hash:
        return payment_hash, PaymentHashSource.BOLT11
    placeholder = hashlib.sha256(payment_request.encode("utf-8")).hexdigest()
    return placeholder, PaymentHashSource.PLACEHOLDER


def describe(amount_sats: int, label: Optional[str] = None) -> str:
    return f"Tip for {label or DEFAULT_LABEL}: {amount_sats} sats"


def build_payment_descriptor(
    amount_sats: int,
    invoice: InvoiceResult,
    recipient: str,
    label: Optional[str] = None,
    validity_window: timedelta = DEFAULT_VALIDITY_WINDOW,
    now: Optional[datetime] = None,
) -> PaymentDescriptor:
    """Build the UI-ready descriptor. No I/O.

    ``expires_at`` is a display hint and ignores the expiry embedded in the
    invoice itself.
    """
    created_at = now or datetime.now(timezone.utc)
    payment_hash, source = derive_payment_hash(invoice.payment_request)
    return PaymentDescriptor(
        amount_sats=amount_sats,
        payment_request=invoice.payment_request,
        payment_hash=payment_hash,
        payment_hash_source=source,
        recipient=recipient,
        description=describe(amount_sats, label),
        created_at=created_at,
        expires_at=created_at + validity_window,
        status=PaymentStatus.PENDING,
        success_action=invoice.success_action,
    )
