from .keys import (  # noqa: F401
    Ed25519Keypair,
    Ed25519PublicKey,
    SignatureScheme,
    intent_digest,
    parse_serialized_signature,
)
