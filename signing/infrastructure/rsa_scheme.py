"""
RSA signature scheme.

SHA-256 digest with PKCS#1 v1.5 padding. Private keys are PKCS#1 DER,
public keys SubjectPublicKeyInfo DER.
"""
import logging

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

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

DEFAULT_KEY_SIZE = 2048
MIN_KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537


class RSASignatureScheme(SignatureScheme):
    """RSA PKCS#1 v1.5 with SHA-256."""

    name = "rsa"
    private_key_label = "RSA PRIVATE KEY"
    public_key_label = "RSA PUBLIC KEY"

    def generate_key_pair(self, bits: int = DEFAULT_KEY_SIZE) -> KeyPair:
        """
        Generate an RSA key pair.

        Args:
            bits: Modulus size, at least 2048

        Returns:
            KeyPair with RSA keys

        Raises:
            KeyGenerationError: If the size is too small or generation fails
        """
        if bits < MIN_KEY_SIZE:
            raise KeyGenerationError(
                f"RSA key size must be at least {MIN_KEY_SIZE} bits, got {bits}"
            )
        try:
            private_key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=bits)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise KeyGenerationError(f"RSA key generation failed: {e}") from e
        logger.info("Generated %d-bit RSA key pair", bits)
        return KeyPair(private_key=private_key, public_key=private_key.public_key())

    def sign(self, private_key, payload: bytes) -> bytes:
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise SigningError("Signing key is not an RSA private key")
        try:
            return private_key.sign(payload, padding.PKCS1v15(), hashes.SHA256())
        except (ValueError, TypeError) as e:
            raise SigningError(f"RSA signing failed: {e}") from e

    def verify(self, public_key, payload: bytes, signature: bytes) -> None:
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise SignatureInvalidError()
        try:
            public_key.verify(signature, payload, padding.PKCS1v15(), hashes.SHA256())
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
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyTypeError("Private key is not an RSA key")
        return key

    def parse_public_key(self, der: bytes):
        try:
            key = serialization.load_der_public_key(der)
        except ValueError as e:
            raise KeyFormatError("Public key DER could not be parsed") from e
        except UnsupportedAlgorithm as e:
            raise KeyTypeError("Public key uses an unsupported algorithm") from e
        if not isinstance(key, rsa.RSAPublicKey):
            raise KeyTypeError("Invalid public key type")
        return key
