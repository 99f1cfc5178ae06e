"""MCP tools exposing Lightning Address resolution."""

from __future__ import annotations

import json
from typing import Any

from mcp.types import Tool

from .errors import LnurlError
from .resolver.service import LightningAddressResolver

# ─── Tool definitions ────────────────────────────────────────────────

_ADDRESS_PROPERTY = {
    "type": "string",
    "description": "Lightning address of the support agent (e.g. alice@example.com)",
    "pattern": "^[^@]+@[^@]+$",
}

TOOL_DEFINITIONS: list[Tool] = [
    Tool(
        name="resolve_lightning_invoice",
        description=(
            "Resolve a Lightning address via LNURL-pay and fetch a payable "
            "invoice for a tip. Amount is in sats, NOT msats. Returns the "
            "invoice, a lightning: URI for QR rendering, and display metadata. "
            "Nothing is paid."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "lightning_address": _ADDRESS_PROPERTY,
                "amount_sats": {
                    "type": "integer",
                    "description": "Tip amount in satoshis",
                    "minimum": 1,
                },
                "comment": {
                    "type": "string",
                    "description": "Optional comment, sent only if the service accepts one",
                },
                "label": {
                    "type": "string",
                    "description": "Recipient display name used in the description",
                },
                "request_id": {
                    "type": ["string", "integer"],
                    "description": (
                        "Support request the tip belongs to; becomes the default "
                        "comment when none is given"
                    ),
                },
            },
            "required": ["lightning_address", "amount_sats"],
        },
    ),
    Tool(
        name="resolve_lightning_address",
        description=(
            "Look up a Lightning address without requesting an invoice. Returns "
            "the LNURL, callback, sendable range in sats and comment limit."
        ),
        inputSchema={
            "type": "object",
            "properties": {"lightning_address": _ADDRESS_PROPERTY},
            "required": ["lightning_address"],
        },
    ),
]

TOOL_NAMES: set[str] = {t.name for t in TOOL_DEFINITIONS}


class ResolverTools:
    """Handles calls to the resolution tools."""

    def __init__(self, resolver: LightningAddressResolver):
        self._resolver = resolver

    @staticmethod
    def get_tools() -> list[Tool]:
        return list(TOOL_DEFINITIONS)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> str:
        """Dispatch a tool call. Returns a JSON string."""
        try:
            if name == "resolve_lightning_invoice":
                return await self._resolve_invoice(arguments)
            if name == "resolve_lightning_address":
                return await self._resolve_address(arguments)
        except LnurlError as e:
            return json.dumps({"error": e.to_dict()}, indent=2, default=str)
        raise ValueError(f"Unknown tool: {name}")

    # ─── Handlers ──────────────────────────────────────────────────

    async def _resolve_invoice(self, arguments: dict[str, Any]) -> str:
        payment = await self._resolver.resolve_invoice(
            arguments.get("lightning_address"),
            arguments.get("amount_sats"),
            arguments.get("comment"),
            label=arguments.get("label"),
            request_id=arguments.get("request_id"),
        )
        result = payment.model_dump(mode="json")
        result["lightning_uri"] = payment.lightning_uri
        return json.dumps(result, indent=2, default=str)

    async def _resolve_address(self, arguments: dict[str, Any]) -> str:
        descriptor = await self._resolver.resolve_callback_only(
            arguments.get("lightning_address")
        )
        return json.dumps(
            {
                "lnurl": descriptor.lnurl,
                "callback": descriptor.callback_url,
                "min_sendable_sats": descriptor.min_sendable_sats,
                "max_sendable_sats": descriptor.max_sendable_sats,
                "comment_allowed": descriptor.comment_allowed,
                "description": descriptor.description,
            },
            indent=2,
        )
