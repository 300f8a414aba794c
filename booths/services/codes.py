"""Booth code generation."""

import secrets
import string
import time

from booths.logging import get_logger
from booths.stores.interfaces import BoothStore

logger = get_logger(__name__)

LETTERS = string.ascii_uppercase
DIGITS = string.digits
CODE_LENGTH = 6
_BASE36 = string.digits + string.ascii_uppercase


def base36(number: int) -> str:
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


class CodeGenerator:
    """Produces booth codes and resolves collisions against storage.

    Uniqueness checks here only reduce retries. The unique constraint on the
    booth code column is what actually guarantees it.
    """

    def __init__(self, store: BoothStore, max_attempts: int = 10) -> None:
        self._store = store
        self._max_attempts = max_attempts

    @staticmethod
    def generate() -> str:
        """Return three uppercase letters followed by three digits."""
        letters = "".join(secrets.choice(LETTERS) for _ in range(3))
        digits = "".join(secrets.choice(DIGITS) for _ in range(3))
        return letters + digits

    def generate_unique(self, max_attempts: int | None = None) -> str:
        """Return a code no booth currently holds.

        After ``max_attempts`` collisions in a row, falls back to a code
        derived from the current time so the call always terminates.
        """
        attempts = max_attempts if max_attempts is not None else self._max_attempts
        for _ in range(attempts):
            code = self.generate()
            if not self._store.code_exists(code):
                return code

        fallback = self._fallback_code()
        logger.warning("code_generation_degraded", attempts=attempts, code=fallback)
        return fallback

    @staticmethod
    def _fallback_code() -> str:
        stamp = base36(time.time_ns() // 1_000_000)[-3:]
        return "XX" + stamp + secrets.choice(DIGITS)
