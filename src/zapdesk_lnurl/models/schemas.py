"""Pydantic models for the LNURL-pay resolution pipeline.

Wire payloads use the LUD-06 camelCase names (``minSendable``, ``pr``); they
are accepted as aliases so the JSON body can be validated directly.
"""

import hashlib
import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class LightningAddress(BaseModel):
    """A ``user@domain`` identifier."""

    username: str = Field(min_length=1)
    domain: str = Field(min_length=1)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.username}@{self.domain}"

    @property
    def well_known_url(self) -> str:
        return f"https://{self.domain}/.well-known/lnurlp/{self.username}"


class PayServiceDescriptor(BaseModel):
    """The pay-service description returned by LUD-16 discovery."""

    callback_url: str = Field(alias="callback", min_length=1)
    min_sendable_msat: int = Field(alias="minSendable", ge=0)
    max_sendable_msat: int = Field(alias="maxSendable", ge=0)
    comment_allowed: int = Field(default=0, alias="commentAllowed", ge=0)
    raw_metadata: str = Field(default="", alias="metadata")
    tag: Optional[str] = Field(default=None)
    lnurl: Optional[str] = Field(
        default=None, description="bech32 LNURL of the discovery endpoint"
    )

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _default_comment_allowed(cls, data: Any) -> Any:
        # Some services send "commentAllowed": null.
        if isinstance(data, dict) and data.get("commentAllowed", 0) is None:
            data = {**data, "commentAllowed": 0}
        return data

    @model_validator(mode="after")
    def _check_bounds(self) -> "PayServiceDescriptor":
        if self.min_sendable_msat > self.max_sendable_msat:
            raise ValueError(
                f"minSendable ({self.min_sendable_msat}) exceeds "
                f"maxSendable ({self.max_sendable_msat})"
            )
        if self.tag is not None and self.tag != "payRequest":
            raise ValueError(f"unsupported LNURL tag {self.tag!r}")
        return self

    @property
    def min_sendable_sats(self) -> int:
        # Smallest whole-sat amount that is still >= minSendable.
        return -(-self.min_sendable_msat // 1000)

    @property
    def max_sendable_sats(self) -> int:
        return self.max_sendable_msat // 1000

    @property
    def metadata_entries(self) -> List[List[Any]]:
        """The decoded ``[[mime, value], ...]`` metadata array, or ``[]``."""
        try:
            entries = json.loads(self.raw_metadata)
        except ValueError:
            return []
        if not isinstance(entries, list):
            return []
        return [e for e in entries if isinstance(e, list) and len(e) >= 2]

    def _metadata_value(self, *mime_types: str) -> Optional[str]:
        for mime, value, *_ in self.metadata_entries:
            if mime in mime_types:
                return value
        return None

    @property
    def description(self) -> Optional[str]:
        return self._metadata_value("text/plain")

    @property
    def identifier(self) -> Optional[str]:
        return self._metadata_value("text/identifier", "text/email")

    @property
    def metadata_hash(self) -> str:
        """sha256 of the raw metadata, the invoice's expected description hash."""
        return hashlib.sha256(self.raw_metadata.encode("utf-8")).hexdigest()


class AmountRequest(BaseModel):
    amount_sats: int
    comment: Optional[str] = None

    model_config = {"frozen": True}


class InvoiceResult(BaseModel):
    """The LUD-06 callback response."""

    payment_request: str = Field(alias="pr", min_length=1)
    success_action: Optional[Dict[str, Any]] = Field(
        default=None, alias="successAction"
    )
    routes: List[Any] = Field(default_factory=list)

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


class PaymentStatus(str, Enum):
    PENDING = "pending"


class PaymentHashSource(str, Enum):
    BOLT11 = "bolt11"
    # sha256 of the invoice text; a UI identifier, never a real payment hash.
    PLACEHOLDER = "placeholder"


class PaymentDescriptor(BaseModel):
    """UI-ready bundle produced once an invoice has been obtained."""

    amount_sats: int
    payment_request: str
    payment_hash: str
    payment_hash_source: PaymentHashSource
    recipient: str
    description: str
    created_at: datetime
    expires_at: datetime
    status: PaymentStatus = PaymentStatus.PENDING
    success_action: Optional[Dict[str, Any]] = None

    model_config = {"frozen": True}

    @property
    def lightning_uri(self) -> str:
        """The string a QR encoder renders."""
        return f"lightning:{self.payment_request}"
