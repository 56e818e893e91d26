"""
Key store port (interface).

This defines the contract for key persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any

from signing.domain.key_pair import KeyPair


class KeyStore(ABC):
    """
    Abstract store for key material.

    Every call hands back plain key values; implementations keep
    no reference to the keys they generate or load.
    """

    @abstractmethod
    def generate_key_pair(self, bits: int) -> KeyPair:
        """
        Generate a new key pair.

        Args:
            bits: Requested key strength

        Returns:
            KeyPair
        """
        pass

    @abstractmethod
    def save_private_key(self, key: Any, path) -> None:
        """
        Persist a private key.

        Args:
            key: Private key
            path: Destination file
        """
        pass

    @abstractmethod
    def save_public_key(self, key: Any, path) -> None:
        """
        Persist a public key.

        Args:
            key: Public key
            path: Destination file
        """
        pass

    @abstractmethod
    def load_private_key(self, path) -> Any:
        """
        Load a private key.

        Args:
            path: Key file

        Returns:
            Private key
        """
        pass

    @abstractmethod
    def load_public_key(self, path) -> Any:
        """
        Load a public key.

        Args:
            path: Key file

        Returns:
            Public key
        """
        pass
