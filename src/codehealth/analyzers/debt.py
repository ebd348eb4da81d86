"""Technical-debt marker scanner.

One lexical pass per file. Only comment text is searched: line comments
and block comments as declared by the file's LanguageConfig. Markers are
matched case-insensitively on word boundaries, so identifiers such as
``todo_list`` or ``xxxLarge`` never count.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..scanning.languages import get_language_config
from ..scanning.models import FileRecord


class MarkerKind(str, Enum):
    FIXME = "FIXME"
    HACK = "HACK"
    TODO = "TODO"
    XXX = "XXX"

    @property
    def priority(self) -> int:
        """Display priority, lower first. Does not affect the score."""
        return _PRIORITY[self]


_PRIORITY = {MarkerKind.FIXME: 0, MarkerKind.HACK: 1, MarkerKind.TODO: 2, MarkerKind.XXX: 3}

_MARKER_RE = re.compile(r"(?<![\w-])(TODO|FIXME|HACK|XXX)(?![\w-])", re.IGNORECASE)

# Author tags and separators between the marker and its message:
# "TODO(alice): x", "FIXME - x", "HACK: x"
_MESSAGE_LEAD_RE = re.compile(r"^\s*(?:\([^)]*\))?\s*[:\-]?\s*")

# Fallback comment syntax for languages without a config entry
_DEFAULT_LINE_COMMENTS = ("#", "//")
_DEFAULT_BLOCK_COMMENTS = (("/*", "*/"),)


@dataclass(frozen=True)
class DebtMarker:
    path: str
    kind: MarkerKind
    line_number: int  # 1-based
    text: str


def _comment_segments(
    line: str,
    in_block: str | None,
    line_comments: tuple[str, ...],
    block_comments: tuple[tuple[str, str], ...],
) -> tuple[list[str], str | None]:
    """Split one line into its comment segments.

    ``in_block`` is the closing delimiter of a block comment left open by a
    previous line, or None. Returns the segments and the updated state.
    """
    segments: list[str] = []
    pos = 0
    while pos < len(line):
        if in_block is not None:
            end = line.find(in_block, pos)
            if end == -1:
                segments.append(line[pos:])
                return segments, in_block
            segments.append(line[pos:end])
            pos = end + len(in_block)
            in_block = None
            continue

        # Earliest comment opener on the rest of the line
        best = None
        for token in line_comments:
            idx = line.find(token, pos)
            if idx != -1 and (best is None or idx < best[0]):
                best = (idx, token, None)
        for opener, closer in block_comments:
            idx = line.find(opener, pos)
            if idx != -1 and (best is None or idx < best[0]):
                best = (idx, opener, closer)
        if best is None:
            break

        idx, token, closer = best
        if closer is None:
            segments.append(line[idx + len(token):])
            break
        pos = idx + len(token)
        in_block = closer
    return segments, in_block


class DebtScanner:
    """Scan file contents for TODO/FIXME/HACK/XXX comment markers."""

    def scan(self, record: FileRecord) -> list[DebtMarker]:
        if record.content is None:
            return []
        cfg = get_language_config(record.language)
        line_comments = cfg.line_comments if cfg else _DEFAULT_LINE_COMMENTS
        block_comments = cfg.block_comments if cfg else _DEFAULT_BLOCK_COMMENTS

        markers: list[DebtMarker] = []
        in_block: str | None = None
        for number, line in enumerate(record.content.splitlines(), start=1):
            segments, in_block = _comment_segments(line, in_block, line_comments, block_comments)
            for segment in segments:
                m = _MARKER_RE.search(segment)
                if m is None:
                    continue
                message = _MESSAGE_LEAD_RE.sub("", segment[m.end():], count=1).strip()
                message = message.rstrip("*/").strip()
                markers.append(
                    DebtMarker(
                        path=record.path,
                        kind=MarkerKind(m.group(1).upper()),
                        line_number=number,
                        text=message,
                    )
                )
                # One marker per line
                break
        return markers


def marker_counts(markers: Iterable[DebtMarker]) -> Counter:
    """Per-kind counts, with every kind present."""
    counts: Counter = Counter({kind: 0 for kind in MarkerKind})
    counts.update(m.kind for m in markers)
    return counts


def debt_component(
    total_markers: int,
    total_loc: int,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> float:
    """``100 - penalty * markers_per_kloc``, floored at 0."""
    if total_loc <= 0 or total_markers <= 0:
        return 100.0
    per_kloc = total_markers * 1000.0 / total_loc
    return max(0.0, 100.0 - thresholds.debt_penalty_per_kloc * per_kloc)


def sort_for_display(markers: Iterable[DebtMarker]) -> list[DebtMarker]:
    """FIXME > HACK > TODO > XXX, then by location."""
    return sorted(markers, key=lambda m: (m.kind.priority, m.path, m.line_number))
