"""
License document encoding.

One encoding serves both the license file and the signed payload:
a JSON object with a fixed key order. The canonical payload is that
object with an empty signature, serialized compactly. Timestamps read
from a file are written back exactly as they were read.
"""
import json
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from core.domain.exceptions import DeserializationError
from core.domain.value_objects import LicenseLevel
from licenses.domain.license import License

FIELD_ORDER = (
    "id",
    "userName",
    "deviceId",
    "level",
    "issuedAt",
    "expiresAt",
    "features",
    "signature",
    "issuerId",
    "version",
)

REQUIRED_FIELDS = ("id", "userName", "deviceId", "level", "issuedAt", "expiresAt")

# HTML-sensitive characters and line separators are written as \u escapes.
_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_ESCAPE_RE = re.compile("[<>&\u2028\u2029]")

_RFC3339_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def format_timestamp(value: datetime) -> str:
    """
    Format an aware datetime as RFC 3339 in UTC.

    Fractional seconds are kept to microsecond precision with trailing
    zeros removed, e.g. ``2025-01-02T03:04:05.5Z``.
    """
    value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    return text + "Z"


def parse_timestamp(text: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Digits beyond microseconds are dropped.

    Raises:
        ValueError: If ``text`` is not RFC 3339
    """
    match = _RFC3339_RE.match(text) if isinstance(text, str) else None
    if not match:
        raise ValueError(f"Invalid RFC 3339 timestamp: {text!r}")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    parsed = datetime.fromisoformat(f"{match.group('date')}T{match.group('time')}{offset}")
    fraction = match.group("fraction")
    if fraction:
        parsed += timedelta(microseconds=int(fraction[:6].ljust(6, "0")))
    return parsed.astimezone(timezone.utc)


def _timestamp_text(value: datetime, text: Optional[str]) -> str:
    """
    Timestamp text for a document.

    Text read from a file is written back unchanged, offset and
    nanoseconds included, as long as it still denotes ``value``.
    """
    if text is not None and parse_timestamp(text) == value:
        return text
    return format_timestamp(value)


def license_to_dict(license: License) -> Dict[str, Any]:
    """
    Convert a license to its document form.

    Args:
        license: License entity

    Returns:
        Dict whose insertion order is FIELD_ORDER
    """
    return {
        "id": license.id,
        "userName": license.user_name,
        "deviceId": license.device_id,
        "level": license.level.value,
        "issuedAt": _timestamp_text(license.issued_at, license.issued_at_text),
        "expiresAt": _timestamp_text(license.expires_at, license.expires_at_text),
        "features": list(license.features) if license.features is not None else None,
        "signature": license.signature,
        "issuerId": license.issuer_id,
        "version": license.version,
    }


def license_from_dict(data: Dict[str, Any]) -> License:
    """
    Build a license from its document form.

    Args:
        data: Decoded JSON object

    Returns:
        License entity

    Raises:
        DeserializationError: If fields are missing or have the wrong type
    """
    if not isinstance(data, dict):
        raise DeserializationError("License document must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise DeserializationError(f"License is missing required fields: {', '.join(missing)}")

    for name in ("id", "userName", "deviceId", "level", "signature", "issuerId", "version"):
        if name in data and not isinstance(data[name], str):
            raise DeserializationError(f"License field {name!r} must be a string")

    features = data.get("features")
    if features is not None and (
        not isinstance(features, list) or not all(isinstance(f, str) for f in features)
    ):
        raise DeserializationError("License field 'features' must be a list of strings")

    try:
        return License(
            id=data["id"],
            user_name=data["userName"],
            device_id=data["deviceId"],
            level=LicenseLevel.parse(data["level"]),
            issued_at=parse_timestamp(data["issuedAt"]),
            expires_at=parse_timestamp(data["expiresAt"]),
            features=features,
            signature=data.get("signature", ""),
            issuer_id=data.get("issuerId", ""),
            version=data.get("version", ""),
            issued_at_text=data["issuedAt"],
            expires_at_text=data["expiresAt"],
        )
    except ValueError as e:
        raise DeserializationError(f"Invalid license data: {e}") from e


def _encode(obj: Dict[str, Any], indent=None) -> str:
    separators = (",", ":") if indent is None else (",", ": ")
    text = json.dumps(obj, ensure_ascii=False, indent=indent, separators=separators)
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def canonical_payload(license: License) -> bytes:
    """
    Bytes that are signed and verified for ``license``.

    The license itself is not modified; the signature field is
    emitted as an empty string.
    """
    document = license_to_dict(license)
    document["signature"] = ""
    return _encode(document).encode("utf-8")


def dumps(license: License) -> bytes:
    """Serialize a license, signature included, as indented JSON."""
    return _encode(license_to_dict(license), indent=2).encode("utf-8")


def loads(data: bytes) -> License:
    """
    Deserialize a license file.

    Raises:
        DeserializationError: If the content is not a valid license document
    """
    try:
        document = json.loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise DeserializationError(f"License is not valid JSON: {e}") from e
    return license_from_dict(document)
