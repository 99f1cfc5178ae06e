"""LNURL-pay resolution stages and the caller-facing resolver."""

from .address import parse_address
from .amount import (
    coerce_amount,
    coerce_comment,
    support_comment,
    validate_amount,
    validate_comment,
    validate_request,
)
from .descriptor import build_payment_descriptor, derive_payment_hash
from .invoice import InvoiceRequester, build_callback_url
from .metadata import MetadataResolver, encode_lnurl
from .service import LightningAddressResolver, resolve_callback_only, resolve_invoice

__all__ = [
    "parse_address",
    "coerce_amount",
    "coerce_comment",
    "support_comment",
    "validate_amount",
    "validate_comment",
    "validate_request",
    "build_payment_descriptor",
    "derive_payment_hash",
    "InvoiceRequester",
    "build_callback_url",
    "MetadataResolver",
    "encode_lnurl",
    "LightningAddressResolver",
    "resolve_callback_only",
    "resolve_invoice",
]
