"""Lightning Address resolution and invoice acquisition for helpdesk tips."""

from .client import LnurlClient, LnurlConfig
from .errors import (
    AddressFormatError,
    AmountOutOfRangeError,
    CommentTooLongError,
    ErrorKind,
    InvalidAmountError,
    InvalidCommentError,
    InvoiceFetchError,
    InvoiceMissingError,
    LnurlError,
    MetadataFetchError,
    ProtocolError,
    ResolutionCancelled,
    Stage,
)
from .models.schemas import PayServiceDescriptor, PaymentDescriptor
from .resolver import LightningAddressResolver, resolve_callback_only, resolve_invoice
from .utils.cancellation import CancellationToken, ResolutionOutcome, ResolutionSlot

__version__ = "0.1.0"

__all__ = [
    "LnurlClient",
    "LnurlConfig",
    "AddressFormatError",
    "AmountOutOfRangeError",
    "CommentTooLongError",
    "ErrorKind",
    "InvalidAmountError",
    "InvalidCommentError",
    "InvoiceFetchError",
    "InvoiceMissingError",
    "LnurlError",
    "MetadataFetchError",
    "ProtocolError",
    "ResolutionCancelled",
    "Stage",
    "PayServiceDescriptor",
    "PaymentDescriptor",
    "LightningAddressResolver",
    "resolve_callback_only",
    "resolve_invoice",
    "CancellationToken",
    "ResolutionOutcome",
    "ResolutionSlot",
]
