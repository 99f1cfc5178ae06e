"""Lightning Address parsing."""

from typing import Any

from ..errors import AddressFormatError
from ..models.schemas import LightningAddress


def parse_address(address: Any) -> LightningAddress:
    """Split ``user@domain`` into its parts.

    Only the shape is checked; whether the domain resolves is left to the
    discovery request.
    """
    if not isinstance(address, str):
        raise AddressFormatError(address)

    parts = address.strip().split("@")
    if len(parts) != 2 or not all(parts):
        raise AddressFormatError(address)

    username, domain = parts
    return LightningAddress(username=username, domain=domain)
