"""LUD-06 callback: request an invoice from a pay service."""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote, urlencode

import structlog

from ..client import LnurlClient
from ..errors import InvoiceFetchError, InvoiceMissingError
from ..models.schemas import InvoiceResult, PayServiceDescriptor
from .amount import sats_to_msats
from .metadata import check_error_status

logger = structlog.get_logger(__name__)


def build_callback_url(
    descriptor: PayServiceDescriptor,
    amount_sats: int,
    comment: Optional[str] = None,
) -> str:
    """Append ``amount`` (msat) and, if the service takes one, ``comment``.

    An existing query string on the callback is preserved. The comment is sent
    as given; length checks happen before this point.
    """
    params: dict[str, Any] = {"amount": sats_to_msats(amount_sats)}
    if comment and descriptor.comment_allowed > 0:
        params["comment"] = comment

    callback = descriptor.callback_url
    if callback.endswith(("?", "&")):
        separator = ""
    elif "?" in callback:
        separator = "&"
    else:
        separator = "?"
    return f"{callback}{separator}{urlencode(params, quote_via=quote)}"


class InvoiceRequester:
    """Issues the single callback request; never retries."""

    def __init__(self, client: LnurlClient):
        self.client = client

    async def request_invoice(
        self,
        descriptor: PayServiceDescriptor,
        amount_sats: int,
        comment: Optional[str] = None,
        log: Any = None,
    ) -> InvoiceResult:
        log = log or logger
        url = build_callback_url(descriptor, amount_sats, comment)
        log.debug("Requesting invoice", amount_sats=amount_sats)

        payload = await self.client.get_json(
            url, error_cls=InvoiceFetchError, log=log
        )
        check_error_status(payload)

        if not payload.get("pr"):
            raise InvoiceMissingError()

        invoice = InvoiceResult.model_validate(payload)
        log.info(
            "Invoice received",
            has_success_action=invoice.success_action is not None,
        )
        return invoice
