"""
PEM armor for key files.

The public RSA key is written with the ``RSA PUBLIC KEY`` label around
a SubjectPublicKeyInfo body, which PEM loaders reject, so armoring is
done here and only DER is handed to the crypto library.
"""
import base64
import binascii
import re

from core.domain.exceptions import KeyFormatError

LINE_LENGTH = 64

_BLOCK_RE = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----\s*(?P<body>.*?)\s*-----END (?P=label)-----",
    re.DOTALL,
)


def encode(label: str, der: bytes) -> bytes:
    """
    Armor DER bytes.

    Args:
        label: Block label, e.g. ``RSA PRIVATE KEY``
        der: Binary key material

    Returns:
        PEM text as bytes, newline terminated
    """
    body = base64.b64encode(der).decode("ascii")
    lines = [body[i:i + LINE_LENGTH] for i in range(0, len(body), LINE_LENGTH)]
    text = "\n".join([f"-----BEGIN {label}-----", *lines, f"-----END {label}-----", ""])
    return text.encode("ascii")


def decode(data: bytes, label: str) -> bytes:
    """
    Extract the DER body of the first armored block.

    Args:
        data: File contents
        label: Label the block must carry

    Returns:
        DER bytes

    Raises:
        KeyFormatError: If there is no block, the label differs or the
            body is not valid base64
    """
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as e:
        raise KeyFormatError("Key file is not PEM text") from e

    match = _BLOCK_RE.search(text)
    if not match:
        raise KeyFormatError("Failed to decode PEM block")
    if match.group("label") != label:
        raise KeyFormatError(
            f"Unexpected PEM label {match.group('label')!r}, expected {label!r}"
        )

    body = "".join(match.group("body").split())
    try:
        der = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyFormatError("PEM body is not valid base64") from e
    if not der:
        raise KeyFormatError("PEM block is empty")
    return der
