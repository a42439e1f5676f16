"""Address normalisation helpers."""

from eth_utils import is_address, to_checksum_address

from curve_engine.errors import InvalidAddress


def normalize_address(address: str) -> str:
    """
    Validate an address and return it lower-cased.

    Mixed-case input is accepted only if its checksum is valid.

    Raises:
        InvalidAddress: If the value is not a 20-byte hex address
    """
    if not isinstance(address, str) or not is_address(address.strip()):
        raise InvalidAddress(f"Invalid address: {address!r}")
    return address.strip().lower()


def checksum(address: str) -> str:
    """EIP-55 form of an address, as required by contract bindings."""
    return to_checksum_address(normalize_address(address))


def address_topic(address: str) -> str:
    """Left-pad an address to a 32-byte indexed-topic value."""
    return "0x" + normalize_address(address)[2:].rjust(64, "0")
