"""Ed25519 signing identities for Farcaster messages.

An identity is derived from exactly one of two credential forms:

    1. A raw 32-byte private key (hex, with or without ``0x``)
    2. A BIP-39 mnemonic, turned into a key with the SLIP-0010 Ed25519
       master-key step: ``I = HMAC-SHA512(key=b"ed25519 seed", data=seed)``
       and the private key is ``I[:32]``. No child derivation is applied.

The public key produced here is what gets registered on-chain as the
account's signer, so the derivation must never change.
"""

import hashlib
import hmac
from dataclasses import dataclass

from mnemonic import Mnemonic
from nacl.signing import SigningKey

from hypercast.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PRIVATE_KEY_BYTES = 32
MNEMONIC_WORD_COUNTS = (12, 24)
SLIP10_ED25519_KEY = b"ed25519 seed"

# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawSecret:
    """A raw Ed25519 private key."""

    secret: bytes

    def __repr__(self) -> str:
        return "RawSecret(<redacted>)"


@dataclass(frozen=True)
class MnemonicPhrase:
    """A BIP-39 mnemonic phrase."""

    phrase: str

    def __repr__(self) -> str:
        return "MnemonicPhrase(<redacted>)"


Credential = RawSecret | MnemonicPhrase

# ---------------------------------------------------------------------------
# Signing identity
# ---------------------------------------------------------------------------


class SigningIdentity:
    """A private Ed25519 key and its public verification key.

    The private scalar stays inside this object: the only ways to use it
    are :meth:`sign` and the derived :attr:`public_key`.
    """

    __slots__ = ("_signing_key",)

    def __init__(self, signing_key: SigningKey):
        self._signing_key = signing_key

    @property
    def public_key(self) -> bytes:
        """The 32-byte Ed25519 public key."""
        return bytes(self._signing_key.verify_key)

    @property
    def public_key_hex(self) -> str:
        """``0x``-prefixed lowercase hex of the public key."""
        return "0x" + self.public_key.hex()

    def sign(self, message: bytes) -> bytes:
        """Return the 64-byte Ed25519 signature of ``message``."""
        return self._signing_key.sign(message).signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SigningIdentity):
            return NotImplemented
        return self.public_key == other.public_key

    def __hash__(self) -> int:
        return hash(self.public_key)

    def __repr__(self) -> str:
        return f"SigningIdentity(public_key={self.public_key_hex})"


def sign(identity: SigningIdentity, message: bytes) -> bytes:
    """Sign ``message`` with ``identity``."""
    return identity.sign(message)


def public_key_hex(identity: SigningIdentity) -> str:
    """Return the public key of ``identity`` as ``0x``-prefixed hex."""
    return identity.public_key_hex


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def derive_from_raw_secret(secret: bytes) -> SigningIdentity:
    """Build an identity from a raw 32-byte private key.

    Raises:
        ConfigurationError: If ``secret`` is not exactly 32 bytes.
    """
    if len(secret) != PRIVATE_KEY_BYTES:
        raise ConfigurationError(
            f"Private key must be {PRIVATE_KEY_BYTES} bytes "
            f"({PRIVATE_KEY_BYTES * 2} hex chars), got {len(secret)} bytes"
        )
    return SigningIdentity(SigningKey(bytes(secret)))


def slip10_master_key(seed: bytes) -> bytes:
    """Return the SLIP-0010 Ed25519 master private key for ``seed``."""
    digest = hmac.new(SLIP10_ED25519_KEY, seed, hashlib.sha512).digest()
    return digest[:PRIVATE_KEY_BYTES]


def mnemonic_to_seed(phrase: str) -> bytes:
    """Validate a BIP-39 phrase and return its 64-byte seed (no passphrase).

    Raises:
        ConfigurationError: If the phrase is not 12 or 24 words, contains a
            word outside the English list, or fails the checksum.
    """
    words = phrase.split()
    if len(words) not in MNEMONIC_WORD_COUNTS:
        raise ConfigurationError(
            f"Mnemonic must have 12 or 24 words, got {len(words)}"
        )

    normalized = " ".join(words)
    if not Mnemonic("english").check(normalized):
        raise ConfigurationError(
            "Mnemonic is not a valid BIP-39 phrase (unknown word or bad checksum)"
        )
    return Mnemonic.to_seed(normalized, passphrase="")


def derive_from_mnemonic(phrase: str) -> SigningIdentity:
    """Build an identity from a BIP-39 mnemonic via the SLIP-0010 master key."""
    seed = mnemonic_to_seed(phrase)
    return SigningIdentity(SigningKey(slip10_master_key(seed)))


def derive_identity(credential: Credential) -> SigningIdentity:
    """Derive the identity for either credential form."""
    if isinstance(credential, RawSecret):
        return derive_from_raw_secret(credential.secret)
    if isinstance(credential, MnemonicPhrase):
        return derive_from_mnemonic(credential.phrase)
    raise ConfigurationError(f"Unsupported credential type: {type(credential).__name__}")


# ---------------------------------------------------------------------------
# Credential parsing
# ---------------------------------------------------------------------------


def parse_private_key_hex(value: str) -> bytes:
    """Decode a hex private key, accepting an optional ``0x`` prefix.

    Raises:
        ConfigurationError: If the value is not valid hex.
    """
    clean = value.strip()
    if clean[:2].lower() == "0x":
        clean = clean[2:]
    try:
        return bytes.fromhex(clean)
    except ValueError:
        raise ConfigurationError("Private key is not valid hex") from None


def credential_from_values(
    private_key: str | None = None,
    mnemonic: str | None = None,
) -> Credential:
    """Pick the credential from configured values.

    Exactly one of ``private_key`` and ``mnemonic`` must be non-blank.

    Raises:
        ConfigurationError: If neither or both are set, or the key is not hex.
    """
    private_key = (private_key or "").strip()
    mnemonic = (mnemonic or "").strip()

    if private_key and mnemonic:
        raise ConfigurationError(
            "Both a private key and a mnemonic are configured; set only one "
            "(SIGNER_PRIVATE_KEY or SIGNER_MNEMONIC)"
        )
    if private_key:
        return RawSecret(parse_private_key_hex(private_key))
    if mnemonic:
        return MnemonicPhrase(mnemonic)
    raise ConfigurationError(
        "No signing key configured. Set SIGNER_PRIVATE_KEY or SIGNER_MNEMONIC"
    )


def identity_from_values(
    private_key: str | None = None,
    mnemonic: str | None = None,
) -> SigningIdentity:
    """Shortcut for ``derive_identity(credential_from_values(...))``."""
    return derive_identity(credential_from_values(private_key, mnemonic))
