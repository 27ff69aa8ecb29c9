# file: osintsim/core/target.py
"""
Scan target validation.

The synthesizer accepts any non-empty string. These helpers are the caller-side
gate used by the CLI and GUI before a scan starts:
- trim surrounding whitespace,
- reject empty input,
- reject input shorter than the configured minimum length.

No phone number format checks are applied; a target is just a token.
"""

from __future__ import annotations

DEFAULT_MIN_TARGET_LENGTH = 5


class EmptyTargetError(ValueError):
    """Raised when the target is empty after trimming."""


class TargetTooShortError(ValueError):
    """Raised when the target is shorter than the minimum scan length."""

    def __init__(self, target: str, min_length: int) -> None:
        super().__init__(
            f"Target must be at least {min_length} characters (got {len(target)})."
        )
        self.target = target
        self.min_length = min_length


def sanitize_target(raw: str) -> str:
    """Trim surrounding whitespace. Inner characters are left untouched."""

    return raw.strip()


def is_scannable(raw: str, *, min_length: int = DEFAULT_MIN_TARGET_LENGTH) -> bool:
    """Return True if `raw` would pass `validate_target`."""

    return len(sanitize_target(raw)) >= max(1, min_length)


def validate_target(raw: str, *, min_length: int = DEFAULT_MIN_TARGET_LENGTH) -> str:
    """
    Sanitize and validate a scan target.

    Args:
        raw: User-provided input.
        min_length: Minimum accepted length after trimming.

    Returns:
        The sanitized target.

    Raises:
        EmptyTargetError: if nothing is left after trimming.
        TargetTooShortError: if the target is shorter than `min_length`.
    """

    target = sanitize_target(raw)
    if not target:
        raise EmptyTargetError("Enter a target number to scan.")
    if len(target) < min_length:
        raise TargetTooShortError(target, min_length)
    return target
