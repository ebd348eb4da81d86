"""Language configurations: the single source of truth for lexical patterns.

Adding a new language:
  1. Add a LanguageConfig entry to LANGUAGES below.
  2. That's it. The scanner, complexity estimator, debt scanner and test
     correlator pick it up automatically.
"""

import re as _re
from dataclasses import dataclass, field
from pathlib import PurePosixPath


@dataclass(frozen=True)
class LanguageConfig:
    """Everything the lexical analyzers need to know about a language."""

    name: str
    extensions: list[str]

    # Line comment introducers (e.g. "#", "//").
    line_comments: tuple[str, ...] = ()

    # Block comment delimiters as (open, close) pairs.
    block_comments: tuple[tuple[str, str], ...] = ()

    # Function detection regex(es), matched per line.
    function_patterns: list[str] = field(default_factory=list)

    # Nesting mode: "brace" (count {}), "indent" (count indentation),
    # or "ruby" (count block keywords against `end`).
    nesting_mode: str = "brace"

    # Test-file conventions. Patterns are matched against the basename
    # with PurePosixPath.match; directories mark every file beneath them.
    test_name_patterns: tuple[str, ...] = ()
    test_dirs: tuple[str, ...] = ("tests", "test", "__tests__", "spec")

    # Candidate test basenames for a source file. "{stem}" and "{ext}"
    # are substituted from the source path.
    test_candidates: tuple[str, ...] = ()

    # In-file markers meaning the source carries its own tests.
    inline_test_patterns: list[str] = field(default_factory=list)


# ── Re-usable building blocks ──────────────────────────────────────

_C_LINE = ("//",)
_C_BLOCK = (("/*", "*/"),)
_HASH_LINE = ("#",)

# Control-flow keywords that share the `name (...) {` shape of a C-family
# function header. Placed before the identifier a function pattern captures.
_NOT_KEYWORD = r"(?!(?:if|else|for|while|do|switch|case|catch|return|throw|new|sizeof)\b)"


# ── Language definitions ───────────────────────────────────────────

LANGUAGES = {
    "rust": LanguageConfig(
        name="rust",
        extensions=[".rs"],
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        function_patterns=[r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+\w+"],
        nesting_mode="brace",
        test_name_patterns=("*_test.rs",),
        test_dirs=("tests", "benches"),
        test_candidates=("{stem}_test.rs", "{stem}.rs"),
        inline_test_patterns=[r"#\[cfg\(test\)\]", r"#\[test\]"],
    ),
    "python": LanguageConfig(
        name="python",
        extensions=[".py", ".pyi"],
        line_comments=_HASH_LINE,
        function_patterns=[r"^\s*(?:async\s+)?def\s+\w+\s*\("],
        nesting_mode="indent",
        test_name_patterns=("test_*.py", "*_test.py", "conftest.py"),
        test_candidates=("test_{stem}.py", "{stem}_test.py"),
        inline_test_patterns=[r"^\s*def\s+test_\w+\s*\(", r"^\s*import\s+doctest\b"],
    ),
    "javascript": LanguageConfig(
        name="javascript",
        extensions=[".js", ".jsx", ".mjs", ".cjs"],
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        function_patterns=[
            r"\bfunction\s*\*?\s*\w*\s*\(",
            r"^\s*(?:export\s+)?(?:const|let|var)\s+\w+\s*=\s*(?:async\s*)?\([^)]*\)\s*=>",
            r"^\s*(?:async\s+)?" + _NOT_KEYWORD + r"\w+\s*\([^)]*\)\s*\{\s*$",
        ],
        nesting_mode="brace",
        test_name_patterns=("*.test.js", "*.spec.js", "*.test.jsx", "*.spec.jsx", "*.test.mjs"),
        test_candidates=("{stem}.test{ext}", "{stem}.spec{ext}"),
        inline_test_patterns=[r"import\.meta\.vitest"],
    ),
    "typescript": LanguageConfig(
        name="typescript",
        extensions=[".ts", ".tsx"],
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        function_patterns=[
            r"\bfunction\s*\*?\s*\w*\s*[<(]",
            r"^\s*(?:export\s+)?(?:const|let|var)\s+\w+\s*(?::[^=]+)?=\s*(?:async\s*)?\([^)]*\)\s*(?::[^=]+)?=>",
            r"^\s*(?:public|private|protected|static|async|\s)*"
            + _NOT_KEYWORD
            + r"\w+\s*\([^)]*\)\s*(?::[^{]+)?\{\s*$",
        ],
        nesting_mode="brace",
        test_name_patterns=("*.test.ts", "*.spec.ts", "*.test.tsx", "*.spec.tsx"),
        test_candidates=("{stem}.test{ext}", "{stem}.spec{ext}"),
        inline_test_patterns=[r"import\.meta\.vitest"],
    ),
    "go": LanguageConfig(
        name="go",
        extensions=[".go"],
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        function_patterns=[r"^\s*func\s+(?:\([^)]*\)\s*)?\w+\s*\("],
        nesting_mode="brace",
        test_name_patterns=("*_test.go",),
        test_dirs=("testdata",),
        test_candidates=("{stem}_test.go",),
    ),
    "java": LanguageConfig(
        name="java",
        extensions=[".java"],
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        function_patterns=[
            r"^\s*(?:public|private|protected)?\s*(?:static\s+)?(?:final\s+)?"
            + _NOT_KEYWORD
            + r"[\w<>\[\],][\w<>\[\],\s]*\s+"
            + _NOT_KEYWORD
            + r"\w+\s*\([^)]*\)\s*(?:throws\s+[\w.,\s]+)?\{?\s*$"
        ],
        nesting_mode="brace",
        test_name_patterns=("*Test.java", "*Tests.java", "Test*.java"),
        test_dirs=("test", "tests"),
        test_candidates=("{stem}Test.java", "{stem}Tests.java", "Test{stem}.java"),
    ),
    "ruby": LanguageConfig(
        name="ruby",
        extensions=[".rb"],
        line_comments=_HASH_LINE,
        block_comments=(("=begin", "=end"),),
        function_patterns=[r"^\s*def\s+[\w.?!]+"],
        nesting_mode="ruby",
        test_name_patterns=("*_spec.rb", "*_test.rb", "test_*.rb"),
        test_dirs=("spec", "test"),
        test_candidates=("{stem}_spec.rb", "{stem}_test.rb", "test_{stem}.rb"),
    ),
    "c": LanguageConfig(
        name="c",
        extensions=[".c", ".h", ".cc", ".cpp", ".hpp"],
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        function_patterns=[
            r"^\s*"
            + _NOT_KEYWORD
            + r"[\w:<>,~][\w\*\s:<>,~]*\s+[\*&]?"
            + _NOT_KEYWORD
            + r"[\w:~]+\s*\([^;{]*\)\s*(?:const\s*)?\{?\s*$"
        ],
        nesting_mode="brace",
        test_name_patterns=("test_*.c", "*_test.c", "*_test.cc", "*_test.cpp", "test_*.cpp"),
        test_candidates=("test_{stem}{ext}", "{stem}_test{ext}"),
    ),
    "shell": LanguageConfig(
        name="shell",
        extensions=[".sh"],
        line_comments=_HASH_LINE,
        function_patterns=[r"^\s*(?:function\s+)?\w+\s*\(\)\s*\{?", r"^\s*function\s+\w+\s*\{?"],
        nesting_mode="brace",
        test_name_patterns=("test_*.sh", "*_test.sh", "*.bats"),
        test_candidates=("test_{stem}.sh", "{stem}_test.sh", "{stem}.bats"),
    ),
}


# Extension to language mapping (built from LANGUAGES)
_EXTENSION_TO_LANGUAGE: dict[str, str] = {}
for _lang_name, _cfg in LANGUAGES.items():
    for _ext in _cfg.extensions:
        _EXTENSION_TO_LANGUAGE[_ext] = _lang_name


def detect_language(filepath) -> str:
    """Detect language from file extension.

    Returns:
        Language name (e.g., "python", "go") or "unknown"
    """
    return _EXTENSION_TO_LANGUAGE.get(PurePosixPath(str(filepath)).suffix.lower(), "unknown")


def get_language_config(name: str) -> LanguageConfig | None:
    """Look up a language by name; None for unknown languages."""
    return LANGUAGES.get(name)


def is_test_path(path: str, language: str) -> bool:
    """True if ``path`` follows its language's test-file conventions."""
    cfg = LANGUAGES.get(language)
    if cfg is None:
        return False
    pure = PurePosixPath(path)
    if any(pure.name == p or pure.match(p) for p in cfg.test_name_patterns):
        return True
    # src/test/... (Java/Maven) and tests/... directories
    return any(part in cfg.test_dirs for part in pure.parts[:-1])


def candidate_test_names(path: str, language: str) -> list[str]:
    """Basenames a test for ``path`` would carry under its language's conventions."""
    cfg = LANGUAGES.get(language)
    if cfg is None:
        return []
    pure = PurePosixPath(path)
    return [c.format(stem=pure.stem, ext=pure.suffix) for c in cfg.test_candidates]


def has_inline_tests(content: str, language: str) -> bool:
    """True if the file contents carry the language's inline test markers."""
    cfg = LANGUAGES.get(language)
    if cfg is None or not cfg.inline_test_patterns:
        return False
    return any(_re.search(p, content, _re.MULTILINE) for p in cfg.inline_test_patterns)
