"""Error types raised while building a course.

Every error aborts the run; the CLI is the only place they are caught.
"""

from __future__ import annotations

from typing import Optional


class CourseBuilderError(Exception):
    """Base class for all course building failures."""


class ConfigError(CourseBuilderError):
    """Invalid settings, reported before any row is read."""


class InvalidModeError(ConfigError):
    def __init__(self, mode: str, allowed):
        self.mode = mode
        self.allowed = tuple(allowed)
        choices = " or ".join(f'"{m}"' for m in self.allowed)
        super().__init__(f'time mode must be {choices}, got "{mode}"')


class InputReadError(CourseBuilderError):
    """The input source could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read {path}: {reason}")


class RowParseError(CourseBuilderError):
    """A malformed row. Line 0 refers to the header."""

    def __init__(self, line: int, detail: str):
        self.line = line
        self.detail = detail
        super().__init__(f"Error in line {line}: {detail}")


class OrderingError(CourseBuilderError):
    """A timestamp went backwards in absolute-time mode."""

    def __init__(self, line: int, got: str, expected_minimum: str, detail: Optional[str] = None):
        self.line = line
        self.got = got
        self.expected_minimum = expected_minimum
        super().__init__(
            detail or f"Error in line {line}: time {got} is before last time {expected_minimum}"
        )


class OutputWriteError(CourseBuilderError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot write {path}: {reason}")
