"""
Lookup of signature schemes by configured name.
"""
from typing import Dict, Type

from signing.infrastructure.ecdsa_scheme import ECDSASignatureScheme
from signing.infrastructure.rsa_scheme import RSASignatureScheme
from signing.ports.signature_scheme import SignatureScheme

SCHEMES: Dict[str, Type[SignatureScheme]] = {
    RSASignatureScheme.name: RSASignatureScheme,
    ECDSASignatureScheme.name: ECDSASignatureScheme,
}


def get_signature_scheme(name: str) -> SignatureScheme:
    """
    Instantiate the scheme registered under ``name``.

    Raises:
        ValueError: If no scheme has that name
    """
    try:
        return SCHEMES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown signature scheme {name!r} (expected one of {', '.join(sorted(SCHEMES))})"
        ) from None
