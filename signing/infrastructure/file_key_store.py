"""
File system implementation of the KeyStore port.

Keys are stored as PEM-armored DER using the labels of the
configured signature scheme.
"""
import logging
from typing import Optional

from core.domain.exceptions import KeyLoadError, StorageError
from core.infrastructure.files import atomic_write, read_bytes
from signing.domain.key_pair import KeyPair
from signing.infrastructure import armor
from signing.infrastructure.rsa_scheme import RSASignatureScheme
from signing.ports.key_store import KeyStore
from signing.ports.signature_scheme import SignatureScheme

logger = logging.getLogger(__name__)

PRIVATE_KEY_MODE = 0o600
PUBLIC_KEY_MODE = 0o644


class FileKeyStore(KeyStore):
    """
    KeyStore that reads and writes PEM files.

    Writes are atomic and create missing parent directories.
    """

    def __init__(self, scheme: Optional[SignatureScheme] = None):
        """
        Initialize the key store.

        Args:
            scheme: Signature scheme deciding key family and PEM labels
                (RSA when omitted)
        """
        self.scheme = scheme or RSASignatureScheme()

    def generate_key_pair(self, bits: int) -> KeyPair:
        return self.scheme.generate_key_pair(bits)

    def save_private_key(self, key, path) -> None:
        der = self.scheme.serialize_private_key(key)
        target = atomic_write(
            path, armor.encode(self.scheme.private_key_label, der), mode=PRIVATE_KEY_MODE
        )
        logger.info("Saved private key to %s", target)

    def save_public_key(self, key, path) -> None:
        der = self.scheme.serialize_public_key(key)
        target = atomic_write(
            path, armor.encode(self.scheme.public_key_label, der), mode=PUBLIC_KEY_MODE
        )
        logger.info("Saved public key to %s", target)

    def load_private_key(self, path):
        """
        Load a private key file.

        Raises:
            KeyLoadError: If the file cannot be read
            KeyFormatError: If the armor or DER is malformed
            KeyTypeError: If the key is not of the scheme's family
        """
        der = armor.decode(self._read(path), self.scheme.private_key_label)
        return self.scheme.parse_private_key(der)

    def load_public_key(self, path):
        """
        Load a public key file.

        Raises:
            KeyLoadError: If the file cannot be read
            KeyFormatError: If the armor or DER is malformed
            KeyTypeError: If the key is not of the scheme's family
        """
        der = armor.decode(self._read(path), self.scheme.public_key_label)
        return self.scheme.parse_public_key(der)

    @staticmethod
    def _read(path) -> bytes:
        try:
            return read_bytes(path)
        except StorageError as e:
            raise KeyLoadError(e.message) from e
