"""Repository scanner: enumerates source files into an immutable FileRecord set.

Inside a git work tree the candidate list comes from ``git ls-files`` so the
standard ignore rules apply; elsewhere the tree is walked directly. Either
way, candidates are filtered by the extension allow-list and exclusion
patterns, read once, and returned in lexical path order.
"""

from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

from ..config import AnalysisConfig
from ..exceptions import FileReadError, InvalidPathError, RepositoryError
from ..logging_config import get_logger
from ..temporal.git_extractor import GitExtractor
from .languages import detect_language, is_test_path
from .models import FileRecord, ScanResult

logger = get_logger(__name__)

# Directories never walked when git is unavailable.
SKIP_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "vendor",
        "venv",
        ".venv",
        "__pycache__",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        "dist",
        "build",
        "target",
        ".eggs",
    }
)

_BINARY_SNIFF_BYTES = 8192


def is_excluded(rel_path: str, patterns: Iterable[str]) -> bool:
    """Check a root-relative POSIX path against exclusion globs.

    ``dir/*`` patterns exclude the directory at any depth.
    """
    pure = PurePosixPath(rel_path)
    parents = pure.parts[:-1]
    for pattern in patterns:
        if pure.match(pattern):
            return True
        if pattern.endswith("/*") and "/" not in pattern[:-2]:
            if pattern[:-2] in parents:
                return True
    return False


def read_text(filepath: Path, max_bytes: int) -> str:
    """Read a source file as UTF-8 text.

    Raises:
        FileReadError: If the file is unreadable, too large or binary
    """
    try:
        size = filepath.stat().st_size
        if size > max_bytes:
            raise FileReadError(filepath, f"larger than {max_bytes} bytes")
        data = filepath.read_bytes()
    except OSError as e:
        raise FileReadError(filepath, f"OS error: {e}")
    if b"\x00" in data[:_BINARY_SNIFF_BYTES]:
        raise FileReadError(filepath, "binary content")
    return data.decode("utf-8", errors="replace")


class RepositoryScanner:
    """Produce the run's FileRecord set for one root directory."""

    def __init__(
        self,
        root_dir: str,
        config: Optional[AnalysisConfig] = None,
        git: Optional[GitExtractor] = None,
    ):
        self.root_dir = Path(root_dir).resolve()
        self.config = config or AnalysisConfig()
        self.git = git
        self._extensions = {e.lower() for e in self.config.extensions}

    def scan(self) -> ScanResult:
        """Scan all candidate files.

        Raises:
            InvalidPathError: If the root does not exist or is not a directory
        """
        if not self.root_dir.exists():
            raise InvalidPathError(self.root_dir, "does not exist")
        if not self.root_dir.is_dir():
            raise InvalidPathError(self.root_dir, "not a directory")

        candidates, git_available = self._candidates()

        files: list[FileRecord] = []
        excluded = 0
        for rel in candidates:
            if PurePosixPath(rel).suffix.lower() not in self._extensions:
                excluded += 1
                continue
            if is_excluded(rel, self.config.exclude_patterns):
                excluded += 1
                logger.debug("Skipped (pattern): %s", rel)
                continue
            record = self._record(rel)
            if record is not None:
                files.append(record)

        files.sort(key=lambda f: f.path)
        result = ScanResult(
            root=str(self.root_dir),
            files=tuple(files),
            git_available=git_available,
            excluded=excluded,
        )
        logger.info(
            "Scan complete: %d files, %d unreadable, %d excluded",
            len(result.files),
            result.skipped,
            excluded,
        )
        return result

    def _candidates(self) -> tuple[list[str], bool]:
        if self.git is not None and self.git.is_repo():
            try:
                return self.git.tracked_files(), True
            except RepositoryError as e:
                logger.warning("%s; falling back to directory walk", e)
        return self._walk(), False

    def _walk(self) -> list[str]:
        paths: list[str] = []
        stack = [self.root_dir]
        while stack:
            directory = stack.pop()
            try:
                entries = list(directory.iterdir())
            except OSError as e:
                logger.warning("Cannot list %s: %s", directory, e)
                continue
            for entry in entries:
                if entry.is_symlink():
                    continue
                if entry.is_dir():
                    if entry.name not in SKIP_DIRS:
                        stack.append(entry)
                elif entry.is_file():
                    paths.append(entry.relative_to(self.root_dir).as_posix())
        return sorted(paths)

    def _record(self, rel: str) -> Optional[FileRecord]:
        filepath = self.root_dir / rel
        try:
            stat = filepath.stat()
        except OSError:
            # Listed by git but deleted from the work tree
            logger.debug("Skipped (missing): %s", rel)
            return None

        language = detect_language(rel)
        is_test = is_test_path(rel, language)
        try:
            content = read_text(filepath, self.config.max_file_size_bytes)
        except FileReadError as e:
            logger.warning("Skipping content analysis for %s: %s", rel, e.reason)
            return FileRecord(
                path=rel,
                language=language,
                line_count=0,
                size_bytes=stat.st_size,
                mtime=stat.st_mtime,
                is_test=is_test,
                read_error=e.reason,
            )

        return FileRecord(
            path=rel,
            language=language,
            line_count=len(content.splitlines()),
            size_bytes=stat.st_size,
            mtime=stat.st_mtime,
            is_test=is_test,
            content=content,
        )
