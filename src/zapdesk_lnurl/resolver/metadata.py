"""LUD-16 discovery: fetch and parse a Lightning Address pay service."""

from __future__ import annotations

from typing import Any

import structlog
from bech32 import bech32_encode, convertbits

from ..client import LnurlClient
from ..errors import MetadataFetchError, ProtocolError
from ..models.schemas import LightningAddress, PayServiceDescriptor

logger = structlog.get_logger(__name__)


def encode_lnurl(url: str) -> str:
    """Return the LUD-01 bech32 encoding of *url* (``LNURL1...``)."""
    data = convertbits(url.encode("utf-8"), 8, 5, True)
    return bech32_encode("lnurl", data).upper()


def check_error_status(payload: Any) -> None:
    """Raise ``ProtocolError`` for an LNURL ``{"status": "ERROR"}`` body."""
    if not isinstance(payload, dict):
        raise ProtocolError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    if str(payload.get("status", "")).upper() == "ERROR":
        raise ProtocolError(payload.get("reason"))


class MetadataResolver:
    """Performs the well-known lookup for a Lightning Address."""

    def __init__(self, client: LnurlClient):
        self.client = client

    async def resolve(
        self, address: LightningAddress, log: Any = None
    ) -> PayServiceDescriptor:
        log = log or logger
        url = address.well_known_url
        log.debug("Fetching LNURL metadata", url=url)

        payload = await self.client.get_json(
            url, error_cls=MetadataFetchError, log=log
        )
        check_error_status(payload)

        if not payload.get("callback"):
            raise ProtocolError("LNURL metadata has no callback")

        descriptor = PayServiceDescriptor.model_validate(
            {**payload, "lnurl": encode_lnurl(url)}
        )
        log.info(
            "LNURL metadata received",
            callback=descriptor.callback_url,
            min_sendable=descriptor.min_sendable_msat,
            max_sendable=descriptor.max_sendable_msat,
            comment_allowed=descriptor.comment_allowed,
        )
        return descriptor
