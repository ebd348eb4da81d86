"""Structural complexity proxy from lexical heuristics.

No parsing: function starts come from per-language regexes, nesting from
brace balance, indentation or Ruby block keywords, and function length from
the extent of each function body. The four raw dimensions saturate at
configurable caps and combine linearly, so the score is monotonic in each
dimension and depends only on the file's bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import numpy as np

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..scanning.languages import LanguageConfig, get_language_config
from ..scanning.models import FileRecord

# Weight of each dimension in the normalized score (sums to 1.0):
# line count, function count, max nesting, longest function.
DIMENSION_WEIGHTS = np.array([0.40, 0.20, 0.20, 0.20])

# Ruby blocks closed by `end`. Conditionals and loops open a block only at
# the start of a statement or as an assigned value; in modifier position
# (`return 1 if x`) they have no `end`.
_RUBY_STATEMENT_OPENER = re.compile(
    r"^(?:(?:private|protected|public)\s+)?"
    r"(?:def|class|module|begin|case|if|unless|while|until|for)\b"
)
_RUBY_VALUE_OPENER = re.compile(r"[=(]\s*(?:begin|case|if|unless|while|until)\b")
_RUBY_DO_BLOCK = re.compile(r"\bdo\s*(?:\|[^|]*\|)?\s*$")
_RUBY_LOOP = re.compile(r"^(?:while|until|for)\b")
_RUBY_CLOSER = re.compile(r"\bend\b")


def ruby_block_delta(statement: str) -> int:
    """Net change in `end`-terminated block depth for one stripped line."""
    opened = len(_RUBY_VALUE_OPENER.findall(statement))
    if _RUBY_STATEMENT_OPENER.match(statement):
        opened += 1
    # `while x do` shares its `end` with the loop
    if _RUBY_DO_BLOCK.search(statement) and not _RUBY_LOOP.match(statement):
        opened += 1
    return opened - len(_RUBY_CLOSER.findall(statement))


@dataclass(frozen=True)
class ComplexityMetric:
    path: str
    line_count: int
    function_count: int
    max_function_length: int
    avg_function_length: float
    max_nesting: int
    score: float  # [0, 100]


def complexity_score(
    line_count: int,
    function_count: int,
    max_nesting: int,
    max_function_length: int,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> float:
    """Combine raw dimensions into a [0, 100] score."""
    raw = np.array([line_count, function_count, max_nesting, max_function_length], dtype=float)
    caps = np.array(
        [
            thresholds.complexity_line_cap,
            thresholds.complexity_function_cap,
            thresholds.complexity_nesting_cap,
            thresholds.complexity_function_length_cap,
        ],
        dtype=float,
    )
    saturated = np.minimum(np.maximum(raw, 0.0) / caps, 1.0)
    return round(float(100.0 * saturated @ DIMENSION_WEIGHTS), 2)


class ComplexityEstimator:
    """Estimate per-file complexity from contents."""

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    def estimate(self, record: FileRecord) -> ComplexityMetric | None:
        """Return None for files without readable content."""
        if record.content is None:
            return None
        content = record.content
        cfg = get_language_config(record.language)
        lines = content.splitlines()

        sizes = self._function_sizes(lines, cfg) if cfg else []
        nesting = self._nesting(content, cfg.nesting_mode if cfg else "brace")

        max_len = max(sizes) if sizes else 0
        avg_len = round(sum(sizes) / len(sizes), 1) if sizes else 0.0
        return ComplexityMetric(
            path=record.path,
            line_count=record.line_count,
            function_count=len(sizes),
            max_function_length=max_len,
            avg_function_length=avg_len,
            max_nesting=nesting,
            score=complexity_score(
                record.line_count, len(sizes), nesting, max_len, self.thresholds
            ),
        )

    # ── Nesting ────────────────────────────────────────────────

    def _nesting(self, content: str, mode: str) -> int:
        if mode == "indent":
            return self._indent_nesting(content)
        if mode == "ruby":
            return self._ruby_nesting(content)
        return self._brace_nesting(content)

    @staticmethod
    def _brace_nesting(content: str) -> int:
        depth = 0
        max_depth = 0
        for ch in content:
            if ch == "{":
                depth += 1
                max_depth = max(max_depth, depth)
            elif ch == "}":
                depth = max(depth - 1, 0)
        return max_depth

    @staticmethod
    def _indent_nesting(content: str) -> int:
        max_depth = 0
        for line in content.split("\n"):
            stripped = line.lstrip()
            if not stripped or stripped.startswith("#"):
                continue
            indent = len(line.expandtabs(4)) - len(stripped)
            max_depth = max(max_depth, indent // 4)
        return max_depth

    @staticmethod
    def _ruby_nesting(content: str) -> int:
        max_depth = 0
        depth = 0
        for line in content.split("\n"):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            depth += ruby_block_delta(stripped) + stripped.count("{") - stripped.count("}")
            depth = max(depth, 0)
            max_depth = max(max_depth, depth)
        return max_depth

    # ── Function sizes ─────────────────────────────────────────

    def _function_sizes(self, lines: list[str], cfg: LanguageConfig) -> list[int]:
        if not cfg.function_patterns:
            return []
        starts = re.compile("|".join(f"(?:{p})" for p in cfg.function_patterns))

        sizes: list[int] = []
        for i, line in enumerate(lines):
            if not starts.search(line):
                continue
            if cfg.nesting_mode == "indent":
                sizes.append(self._indent_fn_size(lines, i))
            elif cfg.nesting_mode == "ruby":
                sizes.append(self._ruby_fn_size(lines, i))
            else:
                sizes.append(self._brace_fn_size(lines, i))
        return sizes

    @staticmethod
    def _brace_fn_size(lines: list[str], start: int) -> int:
        depth = 0
        opened = False
        for j in range(start, len(lines)):
            depth += lines[j].count("{") - lines[j].count("}")
            if "{" in lines[j]:
                opened = True
            if opened and depth <= 0:
                return j - start + 1
            # Declaration without a body (prototype, interface member)
            if not opened and j > start + 2:
                return 1
        return max(len(lines) - start, 1)

    @staticmethod
    def _indent_fn_size(lines: list[str], start: int) -> int:
        base_indent = len(lines[start]) - len(lines[start].lstrip())
        count = 1
        trailing_blank = 0
        for line in lines[start + 1 :]:
            if not line.strip():
                trailing_blank += 1
                continue
            if (len(line) - len(line.lstrip())) <= base_indent:
                break
            count += trailing_blank + 1
            trailing_blank = 0
        return count

    @staticmethod
    def _ruby_fn_size(lines: list[str], start: int) -> int:
        depth = 0
        for j in range(start, len(lines)):
            stripped = lines[j].strip()
            if not stripped or stripped.startswith("#"):
                continue
            depth += ruby_block_delta(stripped)
            if depth <= 0:
                return j - start + 1
        return max(len(lines) - start, 1)


def complexity_component(metrics: dict[str, ComplexityMetric]) -> float:
    """Repo-level complexity health: 100 minus the mean per-file score."""
    if not metrics:
        return 100.0
    return 100.0 - float(np.mean([m.score for m in metrics.values()]))
