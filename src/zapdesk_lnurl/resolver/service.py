"""Caller-facing Lightning Address resolution."""

from __future__ import annotations

import uuid
from typing import Any, Optional

import structlog

from ..client import LnurlClient, LnurlConfig
from ..errors import Stage, classify
from ..models.schemas import AmountRequest, PayServiceDescriptor, PaymentDescriptor
from ..utils.cancellation import CancellationToken
from .address import parse_address
from .amount import (
    coerce_amount,
    coerce_comment,
    support_comment,
    validate_request,
)
from .descriptor import build_payment_descriptor
from .invoice import InvoiceRequester
from .metadata import MetadataResolver

logger = structlog.get_logger(__name__)


class LightningAddressResolver:
    """Resolve a Lightning Address (and an amount) into a payable invoice.

    Holds no per-resolution state, so one instance can serve concurrent
    resolutions. Use as an async context manager, or pass in a client whose
    lifetime the caller manages.
    """

    def __init__(
        self,
        config: Optional[LnurlConfig] = None,
        client: Optional[LnurlClient] = None,
    ):
        self.config = config or (client.config if client else LnurlConfig())
        self.client = client or LnurlClient(self.config)
        self.metadata = MetadataResolver(self.client)
        self.invoices = InvoiceRequester(self.client)

    async def __aenter__(self):
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.__aexit__(exc_type, exc_val, exc_tb)

    @staticmethod
    def _bind(token: Optional[CancellationToken], **fields: Any):
        resolution_id = token.resolution_id if token else uuid.uuid4().hex
        return logger.bind(resolution_id=resolution_id, **fields)

    @staticmethod
    def _checkpoint(token: Optional[CancellationToken]) -> None:
        if token is not None:
            token.raise_if_cancelled()

    async def _discover(
        self, address: Any, token: Optional[CancellationToken], log: Any
    ) -> tuple[str, PayServiceDescriptor]:
        with classify(Stage.ADDRESS, log):
            parsed = parse_address(address)
        self._checkpoint(token)

        with classify(Stage.METADATA, log):
            descriptor = await self.metadata.resolve(
                parsed, log=log.bind(stage=Stage.METADATA.value)
            )
        self._checkpoint(token)
        return str(parsed), descriptor

    async def resolve_callback_only(
        self, address: Any, *, token: Optional[CancellationToken] = None
    ) -> PayServiceDescriptor:
        """Discovery only, for callers that need the LNURL reference before an amount."""
        log = self._bind(token, operation="resolve_callback_only")
        _, descriptor = await self._discover(address, token, log)
        return descriptor

    async def resolve_invoice(
        self,
        address: Any,
        amount_sats: Any,
        comment: Optional[str] = None,
        *,
        label: Optional[str] = None,
        request_id: Optional[Any] = None,
        token: Optional[CancellationToken] = None,
    ) -> PaymentDescriptor:
        """Address → discovery → amount check → invoice → descriptor.

        Raises one of the ``LnurlError`` subclasses, or ``ResolutionCancelled``
        once *token* has been superseded.

        Without a *comment*, a *request_id* becomes the default comment
        ``Tip for support request #<request_id>`` if the service takes one.
        """
        log = self._bind(token, operation="resolve_invoice")

        # Bad amounts never cost a network round trip.
        with classify(Stage.AMOUNT, log):
            amount = coerce_amount(amount_sats)
            comment = coerce_comment(comment)

        recipient, descriptor = await self._discover(address, token, log)

        with classify(Stage.AMOUNT, log):
            if comment is None and request_id is not None:
                comment = support_comment(request_id, descriptor.comment_allowed)
            request = AmountRequest(amount_sats=amount, comment=comment)
            validate_request(request, descriptor)

        with classify(Stage.INVOICE, log):
            invoice = await self.invoices.request_invoice(
                descriptor,
                request.amount_sats,
                request.comment,
                log=log.bind(stage=Stage.INVOICE.value),
            )
        self._checkpoint(token)

        with classify(Stage.DESCRIPTOR, log):
            payment = build_payment_descriptor(
                request.amount_sats,
                invoice,
                recipient=recipient,
                label=label or self.config.default_label,
                validity_window=self.config.validity_window,
            )
        log.info(
            "Payment descriptor built",
            amount_sats=payment.amount_sats,
            recipient=payment.recipient,
            payment_hash=payment.payment_hash,
            payment_hash_source=payment.payment_hash_source.value,
        )
        return payment


async def resolve_invoice(
    address: Any,
    amount_sats: Any,
    comment: Optional[str] = None,
    *,
    label: Optional[str] = None,
    request_id: Optional[Any] = None,
    token: Optional[CancellationToken] = None,
    config: Optional[LnurlConfig] = None,
) -> PaymentDescriptor:
    async with LightningAddressResolver(config) as resolver:
        return await resolver.resolve_invoice(
            address,
            amount_sats,
            comment,
            label=label,
            request_id=request_id,
            token=token,
        )


async def resolve_callback_only(
    address: Any,
    *,
    token: Optional[CancellationToken] = None,
    config: Optional[LnurlConfig] = None,
) -> PayServiceDescriptor:
    async with LightningAddressResolver(config) as resolver:
        return await resolver.resolve_callback_only(address, token=token)
