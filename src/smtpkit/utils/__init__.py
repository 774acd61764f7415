"""Small helpers shared across smtpkit modules."""

from smtpkit.utils.dict import deep_merge
from smtpkit.utils.text import BASE36_ALPHABET, random_base36

__all__ = ["BASE36_ALPHABET", "deep_merge", "random_base36"]
