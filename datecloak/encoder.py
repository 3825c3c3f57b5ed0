#!/usr/bin/env python3
"""
Encodes the original commit date into a commit message and decodes it back.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from . import core, trailer
from .record import DateRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """Password and salt the trailer key is derived from."""

    password: str = field(repr=False)
    salt: bytes


@dataclass(frozen=True)
class DecodedDates:
    """Original authored and committed dates recovered from a trailer."""

    authored: datetime
    committed: datetime


class OriginalDateEncoder:
    """
    Adds the original commit date to commit messages in encrypted form.

    The derived key is cached; call update_credentials() when the password
    or salt changes. The (credentials, key) pair is replaced as a whole, so
    calls already running keep using the pair they started with.
    """

    def __init__(self, credentials: Credentials, enabled: bool = True):
        self.enabled = enabled
        self._update_lock = threading.Lock()
        self._state: Tuple[Credentials, bytes] = (
            credentials,
            core.derive_key(credentials.password, credentials.salt),
        )

    @classmethod
    def from_settings(cls, settings) -> "OriginalDateEncoder":
        """Build an encoder from PrivacySettings."""
        return cls(settings.credentials(), enabled=settings.enabled)

    @property
    def credentials(self) -> Credentials:
        return self._state[0]

    def update_credentials(self, credentials: Credentials) -> None:
        """
        Rebuild the key for new credentials.

        Raises:
            KeyDerivationFailure: The previous key stays in place
        """
        with self._update_lock:
            if credentials == self._state[0]:
                return
            key = core.derive_key(credentials.password, credentials.salt)
            self._state = (credentials, key)
        logger.debug("Trailer key rebuilt for new credentials")

    @staticmethod
    def generate_salt() -> bytes:
        return core.generate_salt()

    def encode(
        self,
        commit_message: str,
        original_date: datetime,
        committed_date: Optional[datetime] = None
    ) -> str:
        """
        Add the original date to commit_message.

        Args:
            commit_message: Message of a commit
            original_date: Original authored date
            committed_date: Original committed date (defaults to original_date)

        Returns:
            The message with a trailer appended, or the message unchanged when
            encoding is disabled or a trailer is already present

        Raises:
            EncryptionFailure: If the record cannot be encrypted
        """
        if not self.enabled:
            return commit_message
        _, key = self._state
        date_record = DateRecord.from_datetimes(original_date, committed_date)
        return trailer.attach(commit_message, date_record, key)

    def decode(self, commit_message: str) -> Optional[DecodedDates]:
        """
        Extract the original dates from commit_message.

        Returns:
            DecodedDates, or None if no date can be recovered with the current
            credentials
        """
        _, key = self._state
        date_record = trailer.extract(commit_message, key)
        if date_record is None:
            return None
        return DecodedDates(
            authored=date_record.authored_datetime(),
            committed=date_record.committed_datetime(),
        )
