"""
Unit tests for license document encoding.
"""
import dataclasses
import json
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import DeserializationError
from licenses.domain import serialization
from licenses.domain.serialization import (
    FIELD_ORDER,
    canonical_payload,
    dumps,
    format_timestamp,
    license_from_dict,
    license_to_dict,
    loads,
    parse_timestamp,
)


@pytest.fixture
def document(sample_license):
    """Fixture for the document form of the sample license."""
    return license_to_dict(sample_license.with_signature("c2lnbmF0dXJl"))


class TestTimestamps:
    """Tests for RFC 3339 timestamps."""

    def test_format_whole_seconds(self):
        """Test timestamps without a fraction."""
        value = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2026-03-01T09:30:00Z"

    def test_format_trims_fraction(self):
        """Test trailing zeros are dropped from the fraction."""
        value = datetime(2026, 3, 1, 9, 30, 0, 500000, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2026-03-01T09:30:00.5Z"

    def test_parse_utc(self):
        """Test parsing a Z timestamp."""
        assert parse_timestamp("2026-03-01T09:30:00Z") == datetime(
            2026, 3, 1, 9, 30, tzinfo=timezone.utc
        )

    def test_parse_offset(self):
        """Test offsets are converted to UTC."""
        parsed = parse_timestamp("2026-03-01T11:30:00+02:00")
        assert parsed == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert parsed.tzinfo == timezone.utc

    def test_parse_nanoseconds(self):
        """Test digits beyond microseconds are dropped."""
        parsed = parse_timestamp("2026-03-01T09:30:00.123456789Z")
        assert parsed.microsecond == 123456

    @pytest.mark.parametrize(
        "text", ["2026-03-01", "2026-03-01T09:30:00", "yesterday", "2026-13-01T00:00:00Z"]
    )
    def test_parse_invalid(self, text):
        """Test malformed timestamps."""
        with pytest.raises(ValueError):
            parse_timestamp(text)


class TestLicenseDocument:
    """Tests for dict conversion."""

    def test_key_order(self, document):
        """Test keys follow the document field order."""
        assert tuple(document) == FIELD_ORDER

    def test_field_values(self, document, sample_license):
        """Test field names and values."""
        assert document["id"] == sample_license.id
        assert document["userName"] == "alice"
        assert document["deviceId"] == "dev-1"
        assert document["level"] == "professional"
        assert document["issuedAt"] == "2026-03-01T09:30:00Z"
        assert document["expiresAt"] == "2026-03-31T09:30:00Z"
        assert document["features"] == ["export", "reports"]
        assert document["signature"] == "c2lnbmF0dXJl"
        assert document["issuerId"] == "issuer-01"
        assert document["version"] == "1.0"

    def test_from_dict(self, document, sample_license):
        """Test converting the document back."""
        assert license_from_dict(document) == sample_license.with_signature("c2lnbmF0dXJl")

    def test_optional_fields_default(self, document):
        """Test documents without optional fields."""
        for name in ("features", "signature", "issuerId", "version"):
            del document[name]

        license = license_from_dict(document)

        assert license.features is None
        assert license.signature == ""
        assert license.issuer_id == ""
        assert license.version == ""

    def test_null_features_kept(self, document):
        """Test a null feature list stays null when encoded again."""
        document["features"] = None
        assert license_to_dict(license_from_dict(document))["features"] is None

    @pytest.mark.parametrize("name", ["id", "userName", "deviceId", "level", "issuedAt", "expiresAt"])
    def test_missing_required_field(self, document, name):
        """Test each required field."""
        del document[name]
        with pytest.raises(DeserializationError, match=name):
            license_from_dict(document)

    def test_wrong_field_type(self, document):
        """Test a non-string field."""
        document["userName"] = 42
        with pytest.raises(DeserializationError, match="userName"):
            license_from_dict(document)

    def test_wrong_features_type(self, document):
        """Test features must be strings."""
        document["features"] = ["export", 1]
        with pytest.raises(DeserializationError, match="features"):
            license_from_dict(document)

    def test_unknown_level(self, document):
        """Test an unknown level."""
        document["level"] = "platinum"
        with pytest.raises(DeserializationError, match="Invalid license level"):
            license_from_dict(document)

    def test_bad_timestamp(self, document):
        """Test an unparseable timestamp."""
        document["expiresAt"] = "next year"
        with pytest.raises(DeserializationError):
            license_from_dict(document)

    def test_not_an_object(self):
        """Test a document that is not a JSON object."""
        with pytest.raises(DeserializationError, match="JSON object"):
            license_from_dict(["id"])

    def test_error_code(self, document):
        """Test deserialization errors carry their code."""
        del document["id"]
        with pytest.raises(DeserializationError) as exc_info:
            license_from_dict(document)
        assert exc_info.value.code == "LICENSE_MALFORMED"


class TestCanonicalPayload:
    """Tests for the signed payload."""

    def test_compact_with_empty_signature(self, sample_license):
        """Test the payload is compact JSON with an empty signature."""
        payload = canonical_payload(sample_license.with_signature("c2lnbmF0dXJl"))

        expected = (
            '{"id":"%s","userName":"alice","deviceId":"dev-1","level":"professional",'
            '"issuedAt":"2026-03-01T09:30:00Z","expiresAt":"2026-03-31T09:30:00Z",'
            '"features":["export","reports"],"signature":"","issuerId":"issuer-01",'
            '"version":"1.0"}' % sample_license.id
        )
        assert payload == expected.encode("utf-8")

    def test_signature_does_not_change_payload(self, sample_license):
        """Test signed and unsigned licenses share a payload."""
        signed = sample_license.with_signature("c2lnbmF0dXJl")

        assert canonical_payload(signed) == canonical_payload(sample_license)
        assert signed.signature == "c2lnbmF0dXJl"

    def test_payload_changes_with_fields(self, sample_license):
        """Test a changed expiry changes the payload."""
        base = canonical_payload(sample_license)
        renewed = sample_license.renew(1, now=sample_license.issued_at)
        assert canonical_payload(renewed) != base

    def test_html_characters_escaped(self, sample_license):
        """Test HTML-sensitive characters and line separators are escaped."""
        license = sample_license.with_signature("")
        license = type(license)(
            id=license.id,
            user_name="Tom & <Jerry>",
            device_id="dev\u2028x",
            level=license.level,
            issued_at=license.issued_at,
            expires_at=license.expires_at,
        )

        payload = canonical_payload(license).decode("utf-8")

        assert '"userName":"Tom \\u0026 \\u003cJerry\\u003e"' in payload
        assert '"deviceId":"dev\\u2028x"' in payload

    def test_non_ascii_kept(self, sample_license):
        """Test other non-ASCII characters are written as UTF-8."""
        license = type(sample_license)(
            id=sample_license.id,
            user_name="Zoë",
            device_id="dev-1",
            level=sample_license.level,
            issued_at=sample_license.issued_at,
            expires_at=sample_license.expires_at,
        )
        assert '"userName":"Zoë"'.encode("utf-8") in canonical_payload(license)


class TestDumpsLoads:
    """Tests for the license file format."""

    def test_dumps_is_indented(self, sample_license):
        """Test the file uses a two-space indent and no trailing newline."""
        text = dumps(sample_license).decode("utf-8")
        lines = text.splitlines()

        assert lines[0] == "{"
        assert lines[1] == f'  "id": "{sample_license.id}",'
        assert '  "features": [' in lines
        assert '    "export",' in lines
        assert not text.endswith("\n")

    def test_loads_dumped(self, sample_license):
        """Test a written license reads back equal."""
        signed = sample_license.with_signature("c2lnbmF0dXJl")
        assert loads(dumps(signed)) == signed

    def test_loads_compact(self, sample_license):
        """Test the compact payload is also a readable license."""
        assert loads(canonical_payload(sample_license)) == sample_license

    def test_loads_invalid_json(self):
        """Test content that is not JSON."""
        with pytest.raises(DeserializationError, match="not valid JSON"):
            loads(b"{not json")

    def test_loads_invalid_utf8(self):
        """Test content that is not UTF-8."""
        with pytest.raises(DeserializationError):
            loads(b"\xff\xfe\xfa")

    def test_loads_wrong_shape(self):
        """Test JSON that is not a license."""
        with pytest.raises(DeserializationError):
            loads(json.dumps({"id": "x"}).encode())

    def test_module_exports(self):
        """Test required fields are a prefix of the field order."""
        assert FIELD_ORDER[: len(serialization.REQUIRED_FIELDS)] == serialization.REQUIRED_FIELDS


class TestTimestampText:
    """Tests for timestamps written back as they were read."""

    def test_payload_reproduced(self, local_time_payload):
        """Test the payload of a loaded license matches the bytes it was read from."""
        license = loads(local_time_payload)

        assert license.issued_at == datetime(2026, 3, 1, 9, 30, 0, 123456, tzinfo=timezone.utc)
        assert license.features is None
        assert canonical_payload(license) == local_time_payload

    def test_file_keeps_text(self, local_time_payload):
        """Test saving a loaded license keeps offset and nanoseconds."""
        document = json.loads(dumps(loads(local_time_payload)))

        assert document["issuedAt"] == "2026-03-01T17:30:00.123456789+08:00"
        assert document["expiresAt"] == "2026-03-31T17:30:00.123456789+08:00"

    def test_renewed_expiry_formatted(self, local_time_payload):
        """Test a renewed expiry is written in UTC while the issue time is kept."""
        license = loads(local_time_payload)

        document = license_to_dict(license.renew(10, now=license.issued_at))

        assert document["issuedAt"] == "2026-03-01T17:30:00.123456789+08:00"
        assert document["expiresAt"] == "2026-04-10T09:30:00.123456Z"

    def test_changed_timestamp_formatted(self, local_time_payload):
        """Test text that no longer matches the timestamp is not reused."""
        license = loads(local_time_payload)
        moved = dataclasses.replace(license, expires_at=license.expires_at + timedelta(days=1))

        assert license_to_dict(moved)["expiresAt"] == "2026-04-01T09:30:00.123456Z"

    def test_text_ignored_for_equality(self, local_time_payload):
        """Test licenses compare by value, not by timestamp spelling."""
        license = loads(local_time_payload)
        assert dataclasses.replace(license, issued_at_text=None, expires_at_text=None) == license
