"""
ECDSA signature scheme on NIST P-256 with SHA-256.
"""
import logging

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from core.domain.exceptions import (
    KeyFormatError,
    KeyGenerationError,
    KeyTypeError,
    SignatureInvalidError,
    SigningError,
)
from signing.domain.key_pair import KeyPair
from signing.ports.signature_scheme import SignatureScheme

logger = logging.getLogger(__name__)


class ECDSASignatureScheme(SignatureScheme):
    """ECDSA P-256 with SHA-256, DER-encoded signatures."""

    name = "ecdsa"
    private_key_label = "EC PRIVATE KEY"
    public_key_label = "PUBLIC KEY"

    def generate_key_pair(self, bits: int = 256) -> KeyPair:
        """
        Generate a P-256 key pair.

        ``bits`` is accepted for interface compatibility; the curve fixes
        the strength.
        """
        try:
            private_key = ec.generate_private_key(ec.SECP256R1())
        except (ValueError, UnsupportedAlgorithm) as e:
            raise KeyGenerationError(f"EC key generation failed: {e}") from e
        logger.info("Generated P-256 EC key pair")
        return KeyPair(private_key=private_key, public_key=private_key.public_key())

    def sign(self, private_key, payload: bytes) -> bytes:
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise SigningError("Signing key is not an EC private key")
        try:
            return private_key.sign(payload, ec.ECDSA(hashes.SHA256()))
        except (ValueError, TypeError) as e:
            raise SigningError(f"ECDSA signing failed: {e}") from e

    def verify(self, public_key, payload: bytes, signature: bytes) -> None:
        if not isinstance(public_key, ec.EllipticCurvePublicKey):
            raise SignatureInvalidError()
        try:
            public_key.verify(signature, payload, ec.ECDSA(hashes.SHA256()))
        except (InvalidSignature, ValueError) as e:
            raise SignatureInvalidError() from e

    def serialize_private_key(self, private_key) -> bytes:
        return private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def serialize_public_key(self, public_key) -> bytes:
        return public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def parse_private_key(self, der: bytes):
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError) as e:
            raise KeyFormatError("Private key DER could not be parsed") from e
        except UnsupportedAlgorithm as e:
            raise KeyTypeError("Private key uses an unsupported algorithm") from e
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise KeyTypeError("Private key is not an EC key")
        return key

    def parse_public_key(self, der: bytes):
        try:
            key = serialization.load_der_public_key(der)
        except ValueError as e:
            raise KeyFormatError("Public key DER could not be parsed") from e
        except UnsupportedAlgorithm as e:
            raise KeyTypeError("Public key uses an unsupported algorithm") from e
        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise KeyTypeError("Invalid public key type")
        return key
