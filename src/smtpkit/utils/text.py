"""Text helpers."""

from __future__ import annotations

import secrets
import string

BASE36_ALPHABET = string.digits + string.ascii_lowercase


def random_base36(length: int = 20) -> str:
    """Return a random token drawn from ``[0-9a-z]``.

    Args:
        length: Number of characters, must be positive.

    Raises:
        ValueError: If ``length`` is not positive.

    Examples:
        >>> len(random_base36(8))
        8
        >>> set(random_base36()) <= set(BASE36_ALPHABET)
        True
    """
    if length <= 0:
        raise ValueError(f"length must be positive, got {length}")
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


__all__ = ["BASE36_ALPHABET", "random_base36"]
