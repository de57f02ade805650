"""
Scalar codecs for ActivityStreams property values.

Each codec converts between one native Python value and its JSON-LD
representation.  Codecs are pure and stateless; ``deserialize`` raises
``TypeError`` when the raw value has the wrong JSON shape and
``ValueError`` when it has the right shape but cannot be parsed.  The
property resolver relies on exactly those two exception types to move
on to the next candidate codec.

Also provides the generic unknown-value normalizers used for every
value the vocabulary does not recognise.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable
from urllib.parse import urlsplit

# ── Data Structures ────────────────────────────────────────────────


@dataclass(frozen=True)
class Codec:
    """A named scalar codec.

    Parameters
    ----------
    name:
        Identifier used in property configurations (``"dateTime"``).
    deserialize:
        ``raw -> native``; raises ``TypeError``/``ValueError`` on mismatch.
    serialize:
        ``native -> raw``; total for any value ``accepts`` approves.
    accepts:
        Predicate telling whether a native Python value is legal for
        this codec.
    """

    name: str
    deserialize: Callable[[Any], Any]
    serialize: Callable[[Any], Any]
    accepts: Callable[[Any], bool]


# ═══════════════════════════════════════════════════════════════════
# STRING-LIKE CODECS
# ═══════════════════════════════════════════════════════════════════


def _string_codec(name: str, label: str) -> Codec:
    """Build a codec whose native and JSON forms are both ``str``."""

    def deserialize(raw: Any) -> str:
        if not isinstance(raw, str):
            raise TypeError(f"{raw!r} cannot be interpreted as a string for {label}")
        return raw

    def serialize(value: str) -> str:
        return value

    return Codec(name, deserialize, serialize, lambda v: isinstance(v, str))


# ═══════════════════════════════════════════════════════════════════
# IRI CODECS
# ═══════════════════════════════════════════════════════════════════


def _parse_iri(raw: Any, label: str) -> str:
    if not isinstance(raw, str):
        raise TypeError(f"{raw!r} cannot be interpreted as a string for {label}")
    try:
        urlsplit(raw)
    except ValueError as exc:
        raise ValueError(f"{raw!r} cannot be interpreted as {label}: {exc}") from exc
    return raw


def _is_iri(value: Any) -> bool:
    try:
        _parse_iri(value, "IRI")
    except (TypeError, ValueError):
        return False
    return True


def _iri_codec(name: str, label: str) -> Codec:
    return Codec(
        name,
        lambda raw: _parse_iri(raw, label),
        lambda value: value,
        _is_iri,
    )


# ═══════════════════════════════════════════════════════════════════
# DATE / TIME CODECS
# ═══════════════════════════════════════════════════════════════════


def _deserialize_date_time(raw: Any) -> datetime:
    """Parse an RFC 3339 timestamp (``Z`` accepted for UTC)."""
    if not isinstance(raw, str):
        raise TypeError(f"{raw!r} cannot be interpreted as a string for xsd:dateTime")
    if "T" not in raw and "t" not in raw:
        raise ValueError(f"{raw!r} cannot be interpreted as xsd:dateTime")
    normalised = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        return datetime.fromisoformat(normalised)
    except ValueError:
        raise ValueError(f"{raw!r} cannot be interpreted as xsd:dateTime") from None


def _serialize_date_time(value: datetime) -> str:
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


# xsd:duration has no fixed-length year or month; these follow the
# 365-day year and 30-day month used by most ActivityPub servers.
_YEAR = timedelta(days=365)
_MONTH = timedelta(days=30)
_DAY = timedelta(days=1)
_HOUR = timedelta(hours=1)
_MINUTE = timedelta(minutes=1)

_DURATION_RE = re.compile(
    r"^(?P<sign>-)?P"
    r"(?:(?P<years>\d+)Y)?"
    r"(?:(?P<months>\d+)M)?"
    r"(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?"
    r"(?:(?P<minutes>\d+)M)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

_TIME_GROUPS = ("hours", "minutes", "seconds")
_ALL_GROUPS = ("years", "months", "days") + _TIME_GROUPS


def _deserialize_duration(raw: Any) -> timedelta:
    if not isinstance(raw, str):
        raise TypeError(f"{raw!r} cannot be interpreted as a string for xsd:duration")
    match = _DURATION_RE.match(raw)
    if match is None:
        raise ValueError(f"{raw!r} malformed for xsd:duration")
    groups = match.groupdict()
    if all(groups[g] is None for g in _ALL_GROUPS):
        raise ValueError(f"{raw!r} malformed for xsd:duration: no components")
    if "T" in raw and all(groups[g] is None for g in _TIME_GROUPS):
        raise ValueError(f"{raw!r} malformed for xsd:duration: empty time part")

    result = timedelta()
    try:
        for key, unit in (
            ("years", _YEAR),
            ("months", _MONTH),
            ("days", _DAY),
            ("hours", _HOUR),
            ("minutes", _MINUTE),
        ):
            if groups[key] is not None:
                result += int(groups[key]) * unit
        if groups["seconds"] is not None:
            result += timedelta(seconds=float(groups["seconds"]))
        return -result if groups["sign"] else result
    except OverflowError:
        raise ValueError(f"{raw!r} out of range for xsd:duration") from None


def _serialize_duration(value: timedelta) -> str:
    total = value // timedelta(microseconds=1)
    sign = "-" if total < 0 else ""
    total = abs(total)

    micro = timedelta(microseconds=1)
    date_part = ""
    for unit, size in (("Y", _YEAR), ("M", _MONTH), ("D", _DAY)):
        count, total = divmod(total, size // micro)
        if count:
            date_part += f"{count}{unit}"

    time_part = ""
    for unit, size in (("H", _HOUR), ("M", _MINUTE)):
        count, total = divmod(total, size // micro)
        if count:
            time_part += f"{count}{unit}"
    if total:
        seconds, fraction = divmod(total, 1_000_000)
        if fraction:
            time_part += f"{seconds}.{fraction:06d}".rstrip("0") + "S"
        else:
            time_part += f"{seconds}S"

    if not date_part and not time_part:
        return f"{sign}PT0S"
    return f"{sign}P{date_part}" + (f"T{time_part}" if time_part else "")


# ═══════════════════════════════════════════════════════════════════
# NUMERIC / BOOLEAN CODECS
# ═══════════════════════════════════════════════════════════════════


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _deserialize_float(raw: Any) -> float:
    if not _is_number(raw):
        raise TypeError(f"{raw!r} cannot be interpreted as a float for xsd:float")
    try:
        return float(raw)
    except OverflowError:
        raise ValueError(f"{raw!r} out of range for xsd:float") from None


def _deserialize_non_negative_integer(raw: Any) -> int:
    if not _is_number(raw):
        raise TypeError(
            f"{raw!r} cannot be interpreted as a number for xsd:nonNegativeInteger"
        )
    if isinstance(raw, float):
        if not math.isfinite(raw) or not raw.is_integer():
            raise ValueError(f"{raw!r} is not an integer for xsd:nonNegativeInteger")
        raw = int(raw)
    if raw < 0:
        raise ValueError(f"{raw!r} is a negative integer for xsd:nonNegativeInteger")
    return raw


def _accepts_non_negative_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _deserialize_boolean(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if _is_number(raw) and raw in (0, 1):
        return bool(raw)
    raise TypeError(f"{raw!r} cannot be interpreted as a bool for xsd:boolean")


# ═══════════════════════════════════════════════════════════════════
# REGISTRY
# ═══════════════════════════════════════════════════════════════════

ANY_URI = "anyURI"
IRI = "IRI"
DATE_TIME = "dateTime"
DURATION = "duration"
FLOAT = "float"
BOOLEAN = "boolean"
NON_NEGATIVE_INTEGER = "nonNegativeInteger"
STRING = "string"
LANG_STRING = "langString"
MIME_MEDIA_TYPE = "mimeMediaTypeValue"
BCP47_LANGUAGE_TAG = "bcp47LanguageTag"
LINK_RELATION = "linkRelation"
UNITS_VALUE = "unitsValue"

IRI_CODECS = frozenset({ANY_URI, IRI})

CODECS: dict[str, Codec] = {
    ANY_URI: _iri_codec(ANY_URI, "xsd:anyURI"),
    IRI: _iri_codec(IRI, "IRI"),
    DATE_TIME: Codec(
        DATE_TIME,
        _deserialize_date_time,
        _serialize_date_time,
        lambda v: isinstance(v, datetime),
    ),
    DURATION: Codec(
        DURATION,
        _deserialize_duration,
        _serialize_duration,
        lambda v: isinstance(v, timedelta),
    ),
    FLOAT: Codec(FLOAT, _deserialize_float, float, _is_number),
    BOOLEAN: Codec(
        BOOLEAN, _deserialize_boolean, bool, lambda v: isinstance(v, bool)
    ),
    NON_NEGATIVE_INTEGER: Codec(
        NON_NEGATIVE_INTEGER,
        _deserialize_non_negative_integer,
        int,
        _accepts_non_negative_integer,
    ),
    STRING: _string_codec(STRING, "xsd:string"),
    LANG_STRING: _string_codec(LANG_STRING, "rdf:langString"),
    MIME_MEDIA_TYPE: _string_codec(MIME_MEDIA_TYPE, "MIME media type value"),
    BCP47_LANGUAGE_TAG: _string_codec(BCP47_LANGUAGE_TAG, "BCP 47 Language Tag"),
    LINK_RELATION: _string_codec(LINK_RELATION, "link relation"),
    UNITS_VALUE: _string_codec(UNITS_VALUE, "units value"),
}


def get_codec(name: str) -> Codec:
    """Return the codec registered under *name*.

    Raises
    ------
    KeyError
        If no codec is registered with that name.
    """
    try:
        return CODECS[name]
    except KeyError:
        raise KeyError(
            f"No codec registered as '{name}'. Available: {sorted(CODECS)}"
        ) from None


# ═══════════════════════════════════════════════════════════════════
# UNKNOWN VALUES
# ═══════════════════════════════════════════════════════════════════


def _copy_json(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _copy_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_copy_json(v) for v in value]
    return value


def unknown_value_deserialize(value: Any) -> Any:
    """Normalise a raw value the vocabulary does not recognise.

    Maps and sequences are copied recursively so the stored value never
    aliases the caller's document; tuples become lists.  Scalars are
    returned unchanged.
    """
    return _copy_json(value)


def unknown_value_serialize(value: Any) -> Any:
    """Normalise a stored unknown value for output (see
    :func:`unknown_value_deserialize`)."""
    return _copy_json(value)
