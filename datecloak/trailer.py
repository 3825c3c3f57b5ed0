#!/usr/bin/env python3
"""
Embedding of the encrypted date record in a commit message.

A message carries at most one trailer line of the form

    GitPrivacy: <base64 of nonce || ciphertext || tag>

separated from the body by a blank line.
"""

import logging
import re
from typing import List, Optional

from . import core, record
from .exceptions import AuthenticationFailure, FormatError
from .record import DateRecord

# Changing the marker orphans every existing trailer.
PREFIX = "GitPrivacy: "

_TOKEN_RE = re.compile(r"\S*")
_EOL_RE = re.compile(r"(\r\n|\r|\n)\Z")
# git line breaks only; str.splitlines() would also split on \x0c, \u2028 and friends
_BREAK_RE = re.compile(r"\r\n|\r|\n")
_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")

logger = logging.getLogger(__name__)


def _lines(message: str) -> List[str]:
    # detection and extraction must agree on what a line is
    return _BREAK_RE.split(message)


def _find_token(message: str) -> Optional[str]:
    for line in _lines(message):
        if line.startswith(PREFIX):
            token = _TOKEN_RE.match(line, len(PREFIX)).group(0)
            if token:
                return token
    return None


def contains_trailer(message: str) -> bool:
    """True if any line of message starts with the trailer marker."""
    return any(line.startswith(PREFIX) for line in _lines(message))


def attach(message: str, date_record: DateRecord, key: bytes) -> str:
    """
    Append the encrypted record to message.

    Returns message unchanged when it already carries a trailer, so calling
    attach twice never duplicates or replaces the first trailer.

    Raises:
        EncryptionFailure: If the cipher cannot encrypt the record
    """
    if contains_trailer(message):
        return message

    plaintext = record.serialize(date_record).encode("utf-8")
    envelope = core.encrypt(key, plaintext)
    separator = "\n" if message.endswith("\n") else "\n\n"
    return message + separator + PREFIX + envelope.to_text()


def extract(message: str, key: bytes) -> Optional[DateRecord]:
    """
    Recover the record from the first trailer line.

    Returns None when there is no trailer, the key does not match, or the
    trailer is malformed. The three cases are deliberately not told apart.
    """
    token = _find_token(message)
    if not token:
        return None

    try:
        envelope = core.CipherEnvelope.from_text(token)
        plaintext = core.decrypt(key, envelope)
        return record.parse(plaintext.decode("utf-8"))
    except AuthenticationFailure:
        logger.debug("Trailer not recoverable: authentication failed")
    except (FormatError, UnicodeDecodeError):
        logger.debug("Trailer not recoverable: malformed")
    return None


def detach(message: str) -> str:
    """
    Remove trailer lines.

    The blank separator line goes too when the trailer ended the message;
    otherwise paragraph structure (e.g. a Signed-off-by block) is kept.
    """
    if not contains_trailer(message):
        return message

    lines = _LINE_RE.findall(message)
    first = next(i for i, line in enumerate(lines) if line.startswith(PREFIX))
    kept = [line for line in lines[first:] if not line.startswith(PREFIX)]
    head = lines[:first]
    if not kept and head and not head[-1].strip():
        head = head[:-1]
    result = "".join(head + kept)
    if not kept and not message.endswith(("\n", "\r")):
        # the trailer ended the message: drop the line break attach() added
        result = _EOL_RE.sub("", result)
    return result
