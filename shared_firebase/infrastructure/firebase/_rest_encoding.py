"""Encode/decode Python values to/from Firestore REST API 'fields' format.

Decoding then re-encoding a document yields the same REST value for every
type the engine copies, except that timestamps are truncated to microsecond
precision (datetime cannot hold nanoseconds). References and geo points
decode to small value objects instead of plain strings/dicts.
"""

import base64
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

# Firestore returns up to nanosecond precision; datetime holds microseconds.
_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


@dataclass(frozen=True)
class DocumentReferenceValue:
    """A Firestore reference value (full resource name of the referenced document)."""

    name: str


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


def _format_timestamp(v: datetime) -> str:
    if v.tzinfo is not None:
        v = v.astimezone(UTC)
    return v.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_timestamp(raw: str) -> datetime:
    raw = _FRACTION_RE.sub(r".\1", raw)
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def encode_value(v: Any) -> dict:
    """Convert one Python value to a Firestore REST Value."""
    if v is None:
        return {"nullValue": None}
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, int):
        return {"integerValue": str(v)}
    if isinstance(v, float):
        return {"doubleValue": v}
    if isinstance(v, datetime):
        return {"timestampValue": _format_timestamp(v)}
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, bytes):
        return {"bytesValue": base64.standard_b64encode(v).decode("ascii")}
    if isinstance(v, DocumentReferenceValue):
        return {"referenceValue": v.name}
    if isinstance(v, GeoPoint):
        return {"geoPointValue": {"latitude": v.latitude, "longitude": v.longitude}}
    if isinstance(v, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(x) for x in v]}}
    if isinstance(v, dict):
        return {"mapValue": {"fields": {k: encode_value(x) for k, x in v.items()}}}
    raise TypeError(f"Unsupported Firestore value type: {type(v)}")


def encode_document(data: dict[str, Any]) -> dict:
    """Convert a Python dict to Firestore REST Document body ({"fields": ...})."""
    return {"fields": {k: encode_value(v) for k, v in data.items()}}


def decode_value(obj: dict) -> Any:
    """Convert one Firestore REST Value to a Python value."""
    if "nullValue" in obj:
        return None
    if "booleanValue" in obj:
        return obj["booleanValue"]
    if "integerValue" in obj:
        return int(obj["integerValue"])
    if "doubleValue" in obj:
        return float(obj["doubleValue"])
    if "timestampValue" in obj:
        return _parse_timestamp(obj["timestampValue"])
    if "stringValue" in obj:
        return obj["stringValue"]
    if "bytesValue" in obj:
        return base64.standard_b64decode(obj["bytesValue"])
    if "referenceValue" in obj:
        return DocumentReferenceValue(obj["referenceValue"])
    if "geoPointValue" in obj:
        point = obj["geoPointValue"]
        return GeoPoint(point.get("latitude", 0.0), point.get("longitude", 0.0))
    if "arrayValue" in obj:
        vals = obj.get("arrayValue", {}).get("values") or []
        return [decode_value(x) for x in vals]
    if "mapValue" in obj:
        fields = obj["mapValue"].get("fields") or {}
        return {k: decode_value(x) for k, x in fields.items()}
    raise TypeError(f"Unsupported Firestore REST value: {sorted(obj)}")


def decode_fields(fields: dict | None) -> dict[str, Any]:
    """Convert a REST Document's "fields" mapping to a Python dict."""
    if not fields:
        return {}
    return {k: decode_value(v) for k, v in fields.items()}
