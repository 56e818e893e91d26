"""
KeyPair value object.
"""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class KeyPair:
    """
    Immutable container for an asymmetric key pair.

    The private key stays with the issuer; the public key is
    distributed to whoever verifies licenses.
    """

    private_key: Any
    public_key: Any
