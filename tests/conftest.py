import logging

import pytest

from datecloak.core import derive_key

# Fixed salts keep derived keys reproducible across runs
SALT = bytes(range(16))
OTHER_SALT = bytes(range(1, 17))
PASSWORD = "correct-horse"


@pytest.fixture(scope="session")
def key():
    """Argon2 is slow on purpose: derive once per session."""
    return derive_key(PASSWORD, SALT)


@pytest.fixture(scope="session")
def other_key():
    return derive_key(PASSWORD, OTHER_SALT)


@pytest.fixture(autouse=True)
def _restore_logging():
    """configure_logging() replaces root handlers; undo after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    pkg = logging.getLogger("datecloak")
    pkg_level = pkg.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    pkg.setLevel(pkg_level)
