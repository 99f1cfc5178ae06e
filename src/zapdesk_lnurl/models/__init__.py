from .schemas import (
    AmountRequest,
    InvoiceResult,
    LightningAddress,
    PayServiceDescriptor,
    PaymentDescriptor,
    PaymentHashSource,
    PaymentStatus,
)

__all__ = [
    "AmountRequest",
    "InvoiceResult",
    "LightningAddress",
    "PayServiceDescriptor",
    "PaymentDescriptor",
    "PaymentHashSource",
    "PaymentStatus",
]
