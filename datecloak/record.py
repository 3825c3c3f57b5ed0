#!/usr/bin/env python3
"""
Plaintext date record carried inside the encrypted trailer.

Canonical text form:

    "<authored epoch> <+HHMM>;<committed epoch> <+HHMM>"
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from .exceptions import FormatError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MAX_OFFSET = 24 * 60  # exclusive, in minutes
# one day of margin on each side so any offset stays representable
_MIN_EPOCH = (datetime(1, 1, 2, tzinfo=timezone.utc) - _EPOCH) // timedelta(seconds=1)
_MAX_EPOCH = (datetime(9999, 12, 30, tzinfo=timezone.utc) - _EPOCH) // timedelta(seconds=1)

_EPOCH_RE = re.compile(r"[+-]?[0-9]{1,20}")
_OFFSET_RE = re.compile(r"([+-])([0-9]{2})(?::?([0-9]{2}))?")


def format_offset(minutes: int) -> str:
    """Render a UTC offset in minutes as ``+HHMM`` / ``-HHMM``."""
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{mins:02d}"


def parse_offset(text: str) -> int:
    """
    Parse ``+HHMM``, ``+HH:MM``, ``+HH`` or ``Z`` into signed minutes.

    Raises:
        FormatError: If the text is not a valid UTC offset
    """
    if text == "Z":
        return 0
    match = _OFFSET_RE.fullmatch(text)
    if not match:
        raise FormatError(f"Invalid UTC offset: {text!r}")
    sign, hours, mins = match.group(1), int(match.group(2)), int(match.group(3) or 0)
    if mins > 59:
        raise FormatError(f"Invalid UTC offset: {text!r}")
    total = hours * 60 + mins
    if total >= _MAX_OFFSET:
        raise FormatError(f"UTC offset out of range: {text!r}")
    return -total if sign == "-" else total


def _check_offset(minutes: int) -> None:
    if not -_MAX_OFFSET < minutes < _MAX_OFFSET:
        raise FormatError(f"UTC offset out of range: {minutes} minutes")


def _check_epoch(seconds: int) -> None:
    if not _MIN_EPOCH <= seconds <= _MAX_EPOCH:
        raise FormatError(f"Epoch seconds out of range: {seconds}")


def _split_datetime(moment: datetime) -> Tuple[int, int]:
    # naive datetimes are local time
    if moment.tzinfo is None or moment.utcoffset() is None:
        moment = moment.astimezone()
    offset = moment.utcoffset()
    offset_minutes = int(offset.total_seconds() / 60)
    epoch = (moment.replace(microsecond=0) - _EPOCH) // timedelta(seconds=1)
    return epoch, offset_minutes


def _join_datetime(epoch: int, offset_minutes: int) -> datetime:
    # avoids datetime.fromtimestamp, which rejects negative epochs on some platforms
    tz = timezone(timedelta(minutes=offset_minutes))
    return (_EPOCH + timedelta(seconds=epoch)).astimezone(tz)


@dataclass(frozen=True)
class DateRecord:
    """Authored and committed instants with their UTC offsets (minutes)."""

    authored_epoch: int
    authored_offset: int
    committed_epoch: int
    committed_offset: int

    def __post_init__(self):
        _check_epoch(self.authored_epoch)
        _check_epoch(self.committed_epoch)
        _check_offset(self.authored_offset)
        _check_offset(self.committed_offset)

    @classmethod
    def from_datetimes(
        cls,
        authored: datetime,
        committed: Optional[datetime] = None
    ) -> "DateRecord":
        """
        Build a record from datetimes, truncated to whole seconds.

        Args:
            authored: Original authored date (naive means local time)
            committed: Original committed date (defaults to authored)
        """
        if committed is None:
            committed = authored
        authored_epoch, authored_offset = _split_datetime(authored)
        committed_epoch, committed_offset = _split_datetime(committed)
        return cls(authored_epoch, authored_offset, committed_epoch, committed_offset)

    def authored_datetime(self) -> datetime:
        return _join_datetime(self.authored_epoch, self.authored_offset)

    def committed_datetime(self) -> datetime:
        return _join_datetime(self.committed_epoch, self.committed_offset)


def serialize(record: DateRecord) -> str:
    """Serialize a record into its canonical text form."""
    return "{} {};{} {}".format(
        record.authored_epoch,
        format_offset(record.authored_offset),
        record.committed_epoch,
        format_offset(record.committed_offset),
    )


def _parse_field(field: str) -> Tuple[int, int]:
    parts = field.split(" ")
    if len(parts) != 2:
        raise FormatError(f"Expected '<epoch> <offset>', got {field!r}")
    epoch_text, offset_text = parts
    if not _EPOCH_RE.fullmatch(epoch_text):
        raise FormatError(f"Invalid epoch seconds: {epoch_text!r}")
    return int(epoch_text), parse_offset(offset_text)


def parse(text: str) -> DateRecord:
    """
    Parse the canonical text form.

    Raises:
        FormatError: Wrong field count, bad number or bad offset
    """
    fields = text.split(";")
    if len(fields) != 2:
        raise FormatError(f"Expected 2 date fields, got {len(fields)}")
    authored_epoch, authored_offset = _parse_field(fields[0])
    committed_epoch, committed_offset = _parse_field(fields[1])
    return DateRecord(authored_epoch, authored_offset, committed_epoch, committed_offset)
