from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import DEFAULT_PASSWORD_CHECK_TIMEOUT

logger = logging.getLogger(__name__)

# One pool per process, shared by every hasher; joined at interpreter exit.
_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix="password-check")


def _check(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class PasswordHasher:
    """Salted password hashing with a bounded verification time.

    A comparison that has not finished within `timeout` seconds counts as a
    mismatch; the worker thread is left to finish on its own.
    """

    def __init__(self, *, timeout: float = DEFAULT_PASSWORD_CHECK_TIMEOUT):
        self._timeout = float(timeout)

    def hash(self, password: str) -> str:
        return generate_password_hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        if not password_hash or password is None:
            return False
        future = _EXECUTOR.submit(_check, password_hash, password)
        try:
            return bool(future.result(timeout=self._timeout))
        except FutureTimeout:
            logger.warning("Password verification exceeded %.1fs, treating as mismatch", self._timeout)
            return False
