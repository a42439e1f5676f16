"""Signing identity resolution from raw secret material."""

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from eth_account import Account
from eth_account.signers.local import LocalAccount

from curve_engine.errors import InvalidCredential

logger = logging.getLogger(__name__)

MIN_MNEMONIC_WORDS = 12
DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"

_PRIVATE_KEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")

# Order of the secp256k1 group; valid keys are 1 <= k < n
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

Account.enable_unaudited_hdwallet_features()


@dataclass(frozen=True)
class Credential:
    """
    Ephemeral signing identity for a single operation.

    Only the address shows up in repr; the account holding the key is hidden.
    """
    address: str
    account: LocalAccount = field(repr=False, compare=False)

    def sign_transaction(self, transaction: dict):
        """Sign a fully populated transaction dict."""
        return self.account.sign_transaction(transaction)


def resolve_credential(secret: str) -> Credential:
    """
    Derive a signing identity from a private key or a seed phrase.

    Args:
        secret: 64 hex characters (optionally 0x-prefixed) or a BIP-39
            phrase of at least 12 words

    Returns:
        Credential with the lower-cased address

    Raises:
        InvalidCredential: For any other shape, or a phrase that fails
            BIP-39 validation
    """
    if not isinstance(secret, str):
        raise InvalidCredential("Secret must be a string")

    cleaned = secret.strip()
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]

    if _PRIVATE_KEY_RE.fullmatch(cleaned):
        if not 0 < int(cleaned, 16) < SECP256K1_N:
            raise InvalidCredential("Invalid private key")
        try:
            account = Account.from_key("0x" + cleaned)
        except Exception as e:
            raise InvalidCredential("Invalid private key") from e
        return Credential(address=account.address.lower(), account=account)

    words = cleaned.split()
    if len(words) >= MIN_MNEMONIC_WORDS:
        try:
            account = Account.from_mnemonic(
                " ".join(words),
                account_path=DEFAULT_DERIVATION_PATH,
            )
        except Exception as e:
            raise InvalidCredential("Invalid mnemonic phrase") from e
        logger.info(f"Resolved wallet from mnemonic. Address: {account.address.lower()}")
        return Credential(address=account.address.lower(), account=account)

    raise InvalidCredential("Invalid private key or mnemonic phrase format")


@contextmanager
def credential_scope(secret: str) -> Iterator[Credential]:
    """
    Resolve a credential for the duration of one operation.

    The credential lives only in the caller's block. Nothing in the engine
    stores it, so it becomes unreachable once the operation returns.
    """
    yield resolve_credential(secret)
