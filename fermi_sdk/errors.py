from __future__ import annotations


class SdkError(Exception):
    """Base class for every error raised by the SDK."""


class KeypairError(SdkError):
    """Malformed, unreadable or wrong-length key material."""


class InvalidPubkeyError(SdkError):
    """A base58 public key string that does not decode to 32 bytes."""


class SerializationError(SdkError):
    """Binary encoding or JSON rendering failed."""


class SigningError(SdkError):
    """Clock or internal fault while producing a signature."""


class SequencerConnectionError(SdkError, ConnectionError):
    """The channel to the sequencer could not be established or reused."""


class SubmissionError(SdkError):
    """The sequencer rejected a transaction."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class RpcError(SdkError):
    """REST read API returned an unexpected status or could not be reached."""


class NotFoundError(SdkError):
    pass


class MarketNotFoundError(NotFoundError):
    pass


class DecimalConversionError(SdkError):
    """Human units could not be converted to canonical integer units."""


class AirdropError(SdkError):
    """Testnet faucet refused or failed the request."""


class ConfigError(SdkError):
    pass
