"""Conversion between PDF date strings and datetime values."""

from __future__ import annotations

from datetime import datetime, timezone

from .objects import PdfString

_FORMATS_WITH_ZONE = ("%Y%m%d%H%M%S%z", "%Y%m%d%H%M%z")


def convert_utc_offset(data):
    """Turn the last ``:`` into ``'`` as PDF dates write their UTC offset."""
    colon = b":" if isinstance(data, (bytes, bytearray)) else ":"
    quote = b"'" if isinstance(data, (bytes, bytearray)) else "'"
    index = data.rfind(colon)
    if index < 0:
        return data
    return data[:index] + quote + data[index + 1:]


def to_pdf_date(value: datetime) -> PdfString:
    """Write a datetime as a PDF date string; naive values are taken as local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    stamp = (
        f"D:{value.year:04d}{value.month:02d}{value.day:02d}"
        f"{value.hour:02d}{value.minute:02d}{value.second:02d}"
    )
    if value.tzinfo is timezone.utc:
        return PdfString(stamp + "Z")
    offset = value.utcoffset()
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return PdfString(convert_utc_offset(f"{stamp}{sign}{hours:02d}:{mins:02d}'"))


def as_datetime(obj):
    """Return the date text of a string object with ``D``, ``:`` and ``'`` removed."""
    if not isinstance(obj, PdfString):
        return None
    cleaned = bytes(byte for byte in obj.value if byte not in b"D:'")
    try:
        return cleaned.decode("utf-8")
    except UnicodeDecodeError:
        return None


def parse_pdf_date(text) -> datetime:
    """Parse a PDF date (a string object or text from as_datetime) into an aware datetime."""
    if not isinstance(text, str):
        cleaned = as_datetime(text)
        if cleaned is None:
            raise ValueError("not a PDF date string")
        text = cleaned
    for fmt in _FORMATS_WITH_ZONE:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.strptime(text, "%Y%m%d").replace(tzinfo=timezone.utc)
    except ValueError:
        raise ValueError(f"unrecognised PDF date: {text!r}") from None