"""Key derivation and message signing."""

from hypercast.crypto.signer import (
    Credential,
    MnemonicPhrase,
    RawSecret,
    SigningIdentity,
    credential_from_values,
    derive_from_mnemonic,
    derive_from_raw_secret,
    derive_identity,
    identity_from_values,
    public_key_hex,
    sign,
)

__all__ = [
    "Credential",
    "MnemonicPhrase",
    "RawSecret",
    "SigningIdentity",
    "credential_from_values",
    "derive_from_mnemonic",
    "derive_from_raw_secret",
    "derive_identity",
    "identity_from_values",
    "public_key_hex",
    "sign",
]
