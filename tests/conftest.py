"""Shared fixtures for tests."""

import json

import pytest

from zapdesk_lnurl.client import LnurlConfig
from zapdesk_lnurl.models.schemas import PayServiceDescriptor
from zapdesk_lnurl.resolver.service import LightningAddressResolver

WELL_KNOWN_URL = "https://example.com/.well-known/lnurlp/alice"
CALLBACK_URL = "https://pay.example/cb?id=1"
FAKE_INVOICE = "lnbc10u1pfakeinvoicefortests"

METADATA = json.dumps(
    [["text/plain", "Tip Alice from support"], ["text/identifier", "alice@example.com"]]
)


@pytest.fixture
def pay_service_payload() -> dict:
    """A LUD-16 discovery response: 1 to 100,000 sats, 32-char comments."""
    return {
        "callback": CALLBACK_URL,
        "minSendable": 1000,
        "maxSendable": 100_000_000,
        "commentAllowed": 32,
        "metadata": METADATA,
        "tag": "payRequest",
    }


@pytest.fixture
def descriptor(pay_service_payload) -> PayServiceDescriptor:
    return PayServiceDescriptor.model_validate(pay_service_payload)


@pytest.fixture
def invoice_payload() -> dict:
    return {
        "pr": FAKE_INVOICE,
        "successAction": {"tag": "message", "message": "Thanks!"},
        "routes": [],
    }


@pytest.fixture
def config() -> LnurlConfig:
    return LnurlConfig(timeout=5)


@pytest.fixture
async def resolver(config):
    async with LightningAddressResolver(config) as r:
        yield r
