#!/usr/bin/env python3
"""
Commit date redaction.
Rounds and clamps the public commit date; the original date is what
OriginalDateEncoder stores in the trailer.
"""

import abc
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence


class DateRedacter(abc.ABC):
    """Abstract timestamp redacter."""

    @abc.abstractmethod
    def redact(self, timestamp: datetime) -> datetime:
        """Redact timestamp."""


class ResolutionDateRedacter(DateRedacter):
    """Reset the selected date fields to their smallest value."""

    def __init__(self, month=False, day=False, hour=False, minute=False, second=False):
        self.month = month
        self.day = day
        self.hour = hour
        self.minute = minute
        self.second = second

    def redact(self, timestamp: datetime) -> datetime:
        changes = {"microsecond": 0}
        if self.month:
            changes["month"] = 1
        if self.day:
            changes["day"] = 1
        if self.hour:
            changes["hour"] = 0
        if self.minute:
            changes["minute"] = 0
        if self.second:
            changes["second"] = 0
        return timestamp.replace(**changes)


class TimeWindowDateRedacter(DateRedacter):
    """Clamp the time of day into [lower_hour:00, upper_hour:00]."""

    def __init__(self, lower_hour: int, upper_hour: int):
        if not 0 <= lower_hour <= upper_hour <= 23:
            raise ValueError(
                f"Need 0 <= lower <= upper <= 23, got {lower_hour}..{upper_hour}"
            )
        self.lower_hour = lower_hour
        self.upper_hour = upper_hour

    def redact(self, timestamp: datetime) -> datetime:
        day_start = timestamp.replace(minute=0, second=0, microsecond=0)
        lower = day_start.replace(hour=self.lower_hour)
        upper = day_start.replace(hour=self.upper_hour)
        if timestamp < lower:
            return lower
        if timestamp > upper:
            return upper
        return timestamp


@dataclass(frozen=True)
class CommitDateResult:
    """Original commit date and the (possibly) redacted one to publish."""

    original: datetime
    redacted: datetime

    @property
    def was_redacted(self) -> bool:
        return self.original != self.redacted


class CommitDateProvider:
    """Applies redacters in order to produce the public commit date."""

    def __init__(self, redacters: Sequence[DateRedacter] = ()):
        self.redacters = list(redacters)

    @classmethod
    def from_settings(cls, settings) -> "CommitDateProvider":
        redacters = []
        if settings.modify_date:
            redacters.append(ResolutionDateRedacter(
                month=settings.modify_month,
                day=settings.modify_day,
                hour=settings.modify_hour,
                minute=settings.modify_minute,
                second=settings.modify_second,
            ))
        if settings.limit_time:
            redacters.append(TimeWindowDateRedacter(
                settings.lower_time_limit, settings.upper_time_limit
            ))
        return cls(redacters)

    def commit_date(self, now: Optional[datetime] = None) -> CommitDateResult:
        """
        Dates to be used for a commit.

        Args:
            now: Original commit date (defaults to the current local time)

        Returns:
            CommitDateResult; original equals redacted when nothing applies
        """
        if now is None:
            now = datetime.now().astimezone()
        redacted = now
        for redacter in self.redacters:
            redacted = redacter.redact(redacted)
        return CommitDateResult(original=now, redacted=redacted)
