"""
Signature scheme port (interface).

A scheme bundles everything that depends on the key family:
key generation, signing, verification and DER (de)serialization.
Swapping the scheme changes the key files and signatures, not the
license manager.
"""
from abc import ABC, abstractmethod
from typing import Any

from signing.domain.key_pair import KeyPair


class SignatureScheme(ABC):
    """Capability interface for one asymmetric signature family."""

    name: str = ""
    # PEM labels used when armoring keys of this family.
    private_key_label: str = ""
    public_key_label: str = ""

    @abstractmethod
    def generate_key_pair(self, bits: int) -> KeyPair:
        """
        Generate a fresh key pair.

        Args:
            bits: Requested strength (modulus size where applicable)

        Returns:
            New KeyPair

        Raises:
            KeyGenerationError: If the key cannot be generated
        """
        pass

    @abstractmethod
    def sign(self, private_key: Any, payload: bytes) -> bytes:
        """
        Sign ``payload`` with ``private_key``.

        Raises:
            SigningError: If the key is unusable
        """
        pass

    @abstractmethod
    def verify(self, public_key: Any, payload: bytes, signature: bytes) -> None:
        """
        Check ``signature`` over ``payload``.

        Raises:
            SignatureInvalidError: On any mismatch
        """
        pass

    @abstractmethod
    def serialize_private_key(self, private_key: Any) -> bytes:
        """Encode a private key as DER."""
        pass

    @abstractmethod
    def serialize_public_key(self, public_key: Any) -> bytes:
        """Encode a public key as DER."""
        pass

    @abstractmethod
    def parse_private_key(self, der: bytes) -> Any:
        """
        Decode a DER private key.

        Raises:
            KeyFormatError: If the DER cannot be decoded
            KeyTypeError: If the key belongs to another family
        """
        pass

    @abstractmethod
    def parse_public_key(self, der: bytes) -> Any:
        """
        Decode a DER public key.

        Raises:
            KeyFormatError: If the DER cannot be decoded
            KeyTypeError: If the key belongs to another family
        """
        pass
