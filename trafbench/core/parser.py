"""Parser for the report printed by the process-timing wrapper.

GNU ``time`` in its default format appends two lines after the child exits::

    0.00user 0.00system 0:00.00elapsed 150%CPU (0avgtext+0avgdata 4088maxresident)k
    0inputs+0outputs (0major+206minor)pagefaults 0swaps

Only the first three space-separated tokens are consumed. The captured text
must start with them; anything printed before the report (benchmark output,
"Command exited with non-zero status" notes, locale noise) is a format error.
"""

from typing import Optional

from .results import TimingResult


USER_SUFFIX = "user"
SYSTEM_SUFFIX = "system"
ELAPSED_SUFFIX = "elapsed"

# Token position -> suffix the token must carry
EXPECTED_SUFFIXES = (USER_SUFFIX, SYSTEM_SUFFIX, ELAPSED_SUFFIX)


class TimingFormatError(ValueError):
    """Captured output does not start with the timing wrapper report."""

    def __init__(self, position: int, expected_suffix: str, token: Optional[str]):
        self.position = position
        self.expected_suffix = expected_suffix
        self.token = token

        if token is None:
            message = (
                f"Missing token {position}: expected a value ending in "
                f"'{expected_suffix}'"
            )
        else:
            message = (
                f"Token {position} {token!r} does not end with "
                f"'{expected_suffix}'"
            )
        super().__init__(message)


def _strip_suffix(tokens, position: int) -> str:
    suffix = EXPECTED_SUFFIXES[position]

    if position >= len(tokens):
        raise TimingFormatError(position, suffix, None)

    token = tokens[position]
    if not token.endswith(suffix):
        raise TimingFormatError(position, suffix, token)

    return token[:len(token) - len(suffix)]


def parse(text: str) -> TimingResult:
    """Parse timing wrapper output into a TimingResult.

    Args:
        text: Combined stdout/stderr captured from the wrapped benchmark

    Returns:
        TimingResult holding the user, system and elapsed values as text
        and the unchanged input

    Raises:
        TimingFormatError: If any of the three leading tokens is missing or
            lacks its suffix
    """
    tokens = text.split(" ")

    user_time = _strip_suffix(tokens, 0)
    system_time = _strip_suffix(tokens, 1)
    elapsed_time = _strip_suffix(tokens, 2)

    return TimingResult(
        user_time=user_time,
        system_time=system_time,
        elapsed_time=elapsed_time,
        raw_output=text
    )
