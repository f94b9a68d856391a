from __future__ import annotations

import json
import logging
from pathlib import Path

import base58
from nacl.exceptions import CryptoError
from nacl.signing import SigningKey

from fermi_sdk.domain.models import Pubkey
from fermi_sdk.errors import KeypairError

logger = logging.getLogger(__name__)

SEED_LENGTH = 32
KEYPAIR_LENGTH = 64


class TradingKeypair:
    """
    Ed25519 keypair used to sign orders and cancels.

    Accepted inputs:
    - JSON file holding a 64-element byte array: [secret(32) ..., public(32) ...]
    - raw 64 bytes in the same layout
    - base58 32-byte secret (public key is derived)
    - freshly generated (tests, throwaway testnet accounts)

    The secret never leaves this object and is never logged.
    """

    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key
        self._public = bytes(signing_key.verify_key)

    @classmethod
    def generate(cls) -> TradingKeypair:
        return cls(SigningKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> TradingKeypair:
        if len(seed) != SEED_LENGTH:
            raise KeypairError(f"Secret key must be {SEED_LENGTH} bytes, got {len(seed)}")
        try:
            return cls(SigningKey(bytes(seed)))
        except (CryptoError, TypeError, ValueError) as exc:
            raise KeypairError(f"Invalid secret key: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> TradingKeypair:
        if len(data) != KEYPAIR_LENGTH:
            raise KeypairError(f"Keypair must be {KEYPAIR_LENGTH} bytes, got {len(data)}")
        keypair = cls.from_seed(bytes(data[:SEED_LENGTH]))
        if keypair.pubkey_bytes() != bytes(data[SEED_LENGTH:]):
            raise KeypairError("Invalid keypair bytes: public half does not match the secret")
        return keypair

    @classmethod
    def from_base58_secret(cls, secret_b58: str) -> TradingKeypair:
        try:
            seed = base58.b58decode(secret_b58.strip())
        except ValueError as exc:
            raise KeypairError(f"Invalid base58: {exc}") from exc
        return cls.from_seed(seed)

    @classmethod
    def from_file(cls, path: str | Path) -> TradingKeypair:
        p = Path(path)
        try:
            content = p.read_text(encoding="utf-8")
        except OSError as exc:
            raise KeypairError(f"Failed to read file '{p}': {exc}") from exc

        try:
            values = json.loads(content)
        except json.JSONDecodeError as exc:
            raise KeypairError(f"Failed to parse JSON: {exc}") from exc

        if not isinstance(values, list) or not all(isinstance(v, int) and 0 <= v <= 255 for v in values):
            raise KeypairError("Keypair file must hold a JSON array of byte values")

        keypair = cls.from_bytes(bytes(values))
        logger.info(f"Loaded keypair {keypair.pubkey_string()} from {p}")
        return keypair

    def pubkey(self) -> Pubkey:
        return Pubkey(self._public)

    def pubkey_bytes(self) -> bytes:
        return self._public

    def pubkey_string(self) -> str:
        return str(self.pubkey())

    def to_bytes(self) -> bytes:
        """Secret seed followed by public key, the on-disk keypair layout."""
        return bytes(self._signing_key) + self._public

    def sign(self, message: bytes) -> bytes:
        return self._signing_key.sign(message).signature

    def __repr__(self) -> str:
        return f"TradingKeypair(pubkey={self.pubkey_string()})"


