"""Validation records and helpers for locating source lines."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Pos:
    """A position in a source file."""

    line: int
    column: int
    byte: int


@dataclass(frozen=True)
class Range:
    """A half-open byte range within a named source file."""

    filename: str
    start: Pos
    end: Pos

    @property
    def empty(self) -> bool:
        return self.start.byte == self.end.byte

    def _contains_offset(self, offset: int) -> bool:
        return self.start.byte <= offset < self.end.byte

    def overlaps(self, other: Range) -> bool:
        """Tell whether two non-empty ranges in the same file share any bytes."""
        if self.filename != other.filename or self.empty or other.empty:
            return False
        return (
            self._contains_offset(other.start.byte)
            or self._contains_offset(other.end.byte)
            or other._contains_offset(self.start.byte)
            or other._contains_offset(self.end.byte)
        )


@dataclass
class ResourceValidationInfo:
    """Where a resource and its fields were defined."""

    source_ranges: dict[str, Range] = field(default_factory=dict)
    block_def_range: Range | None = None
    resource_id: str = ""


@dataclass
class ValidationError:
    """One problem found while validating a resource."""

    error_message: str
    resource_id: str = ""
    field_name: str = ""
    resource_not_found: bool = False
    resource_not_found_id: str = ""


class InternalError(Exception):
    """An invariant of the program itself was broken."""


def log_internal_error(message: str, *args: object) -> None:
    """Raise an InternalError with ``message`` formatted by ``args``."""
    raise InternalError(message % args if args else message)


@dataclass(frozen=True)
class Line:
    """A numbered line of source text."""

    line_number: int
    content: str

    def __str__(self) -> str:
        return f"{self.line_number}: {self.content}"


def _scan_lines(data: bytes, filename: str) -> Iterator[tuple[Range, bytes]]:
    offset = 0
    line_number = 1
    while offset < len(data):
        newline = data.find(b"\n", offset)
        if newline == -1:
            token = data[offset:]
            next_offset = len(data)
        else:
            token = data[offset:newline]
            next_offset = newline + 1
        if token.endswith(b"\r"):
            token = token[:-1]
        start = Pos(line_number, 1, offset)
        end = Pos(line_number, 1 + len(token), offset + len(token))
        yield Range(filename, start, end), token
        offset = next_offset
        line_number += 1


def read_lines(source_range: Range, data: bytes) -> list[Line]:
    """Return the lines of ``data`` that overlap ``source_range``."""
    return [
        Line(line_range.start.line, token.decode("utf-8", errors="replace"))
        for line_range, token in _scan_lines(data, source_range.filename)
        if line_range.overlaps(source_range)
    ]


def read_lines_for_range(source_range: Range) -> list[Line]:
    """Read the file named by ``source_range`` and return its overlapping lines."""
    data = Path(source_range.filename).read_bytes()
    return read_lines(source_range, data)