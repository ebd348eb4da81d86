"""Configuration loading and management for codehealth.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.codehealth.toml)
    3. Project config (<root>/.codehealth.toml)
    4. Explicit config file (--config)
    5. Environment variables (CODEHEALTH_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(churn_days=30, threshold=70)
    >>> config.churn_days
    30
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]
OwnershipMethod = Literal["blame", "commits"]


@dataclass(frozen=True)
class ThresholdConfig:
    """Scoring constants and classification boundaries.

    Attributes:
        Churn:
            churn_scale: Score points per in-window change (10 changes = 100)

        Complexity saturation caps (a dimension at or beyond its cap
        contributes its full weight):
            complexity_line_cap: Line count
            complexity_function_cap: Function/block count
            complexity_nesting_cap: Maximum nesting depth
            complexity_function_length_cap: Longest function, in lines

        Debt:
            debt_penalty_per_kloc: Points lost per marker per 1000 lines

        Danger zones:
            danger_floor: Both churn and complexity must exceed this
            danger_high: Danger score at or above this is "high"
            danger_critical: Danger score at or above this is "critical"

        Ownership:
            single_author_share: Primary share above this = single-author file
            significant_share: Share needed to count toward the bus factor

        Trend:
            trend_delta: Score change needed to call a trend improving/declining
    """

    churn_scale: float = 10.0

    complexity_line_cap: int = 1000
    complexity_function_cap: int = 40
    complexity_nesting_cap: int = 8
    complexity_function_length_cap: int = 150

    debt_penalty_per_kloc: float = 4.0

    danger_floor: float = 25.0
    danger_high: float = 50.0
    danger_critical: float = 70.0

    single_author_share: float = 0.8
    significant_share: float = 0.1

    trend_delta: float = 3.0

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if self.churn_scale <= 0:
            raise ValueError("churn_scale must be positive")

        for field_name in (
            "complexity_line_cap",
            "complexity_function_cap",
            "complexity_nesting_cap",
            "complexity_function_length_cap",
        ):
            if getattr(self, field_name) < 1:
                raise ValueError(f"{field_name} must be at least 1")

        if self.debt_penalty_per_kloc < 0:
            raise ValueError("debt_penalty_per_kloc must be non-negative")

        if not 0.0 <= self.danger_floor < self.danger_high < self.danger_critical <= 100.0:
            raise ValueError(
                "danger boundaries must satisfy 0 <= floor < high < critical <= 100"
            )

        for field_name in ("single_author_share", "significant_share"):
            value = getattr(self, field_name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{field_name} must be in (0.0, 1.0]")

        if self.trend_delta < 0:
            raise ValueError("trend_delta must be non-negative")


DEFAULT_THRESHOLDS = ThresholdConfig()

DEFAULT_EXTENSIONS = [
    ".rs",
    ".py",
    ".pyi",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".ts",
    ".tsx",
    ".go",
    ".java",
    ".rb",
    ".c",
    ".h",
    ".cc",
    ".cpp",
    ".hpp",
    ".sh",
]


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one health-score run.

    Attributes:
        Windows:
            churn_days: Trailing window for churn, in days
            stale_days: Base staleness threshold; deeper tiers are multiples

        Gating and run shape:
            threshold: Fail (exit 1) when the score is below this, if set
            skip_ownership: Skip bus-factor analysis entirely
            ownership_method: "blame" (line attribution) or "commits" (commit count)

        Performance tuning:
            workers: Number of parallel workers (None = CPU count)
            git_max_commits: Maximum commits to read (0 = full history)

        File filtering:
            extensions: File extensions to analyze
            exclude_patterns: Glob patterns to exclude from the scan
            max_file_size_mb: Files larger than this are skipped

        History:
            history_dir: Project-local directory holding history.db
            trend_lookback: Compare the latest score to this many snapshots back
            sparkline_length: Number of recent snapshots in the sparkline

        Output control:
            verbosity: Logging verbosity level (quiet, normal or verbose)
            log_file: Also append log records to this file
    """

    churn_days: int = 14
    stale_days: int = 90

    threshold: Optional[float] = None
    skip_ownership: bool = False
    ownership_method: OwnershipMethod = "blame"

    workers: Optional[int] = None
    git_max_commits: int = 0

    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            "vendor/*",
            "node_modules/*",
            "dist/*",
            "build/*",
            "target/*",
            ".git/*",
            "venv/*",
            ".venv/*",
            "__pycache__/*",
            ".tox/*",
            ".mypy_cache/*",
            ".pytest_cache/*",
            "*.egg-info/*",
            "*.min.js",
            "*.bundle.js",
            "*.generated.*",
        ]
    )
    max_file_size_mb: float = 5.0

    history_dir: str = ".codehealth"
    trend_lookback: int = 1
    sparkline_length: int = 20

    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.churn_days < 1:
            raise ValueError("churn_days must be at least 1")
        if self.stale_days < 1:
            raise ValueError("stale_days must be at least 1")

        if self.threshold is not None and not 0.0 <= self.threshold <= 100.0:
            raise ValueError("threshold must be between 0 and 100")
        if self.ownership_method not in ("blame", "commits"):
            raise ValueError("ownership_method must be 'blame' or 'commits'")

        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.git_max_commits < 0:
            raise ValueError("git_max_commits must be non-negative")

        if not self.extensions:
            raise ValueError("extensions must not be empty")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")

        if self.trend_lookback < 1:
            raise ValueError("trend_lookback must be at least 1")
        if self.sparkline_length < 2:
            raise ValueError("sparkline_length must be at least 2")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be quiet, normal or verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def worker_count(self) -> int:
        """Resolved worker pool size."""
        return self.workers or os.cpu_count() or 1


def load_config(
    config_file: Optional[Path] = None, root: Optional[Path] = None, **overrides
) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        root: Analysis root searched for a project ``.codehealth.toml``
              (defaults to the current directory)
        **overrides: Direct overrides (typically from CLI flags); ``None``
                     values are ignored so unset flags keep lower-priority values

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".codehealth.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = (root or Path.cwd()) / ".codehealth.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    # [thresholds] section from TOML
    thresholds_dict = merged.pop("thresholds", None)
    if isinstance(thresholds_dict, dict):
        try:
            merged["thresholds"] = ThresholdConfig(**thresholds_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid [thresholds] config: {e}")
        except ValueError as e:
            raise InvalidConfigError("thresholds", thresholds_dict, str(e))
    elif isinstance(thresholds_dict, ThresholdConfig):
        merged["thresholds"] = thresholds_dict

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        key = str(e).split(" ", 1)[0]
        raise InvalidConfigError(key, merged.get(key), str(e))


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODEHEALTH_* environment variables.

    Supported environment variables (list fields are not configurable here):
        CODEHEALTH_CHURN_DAYS: int
        CODEHEALTH_STALE_DAYS: int
        CODEHEALTH_THRESHOLD: float
        CODEHEALTH_SKIP_OWNERSHIP: bool (true/false/1/0)
        CODEHEALTH_OWNERSHIP_METHOD: blame/commits
        CODEHEALTH_WORKERS: int
        CODEHEALTH_GIT_MAX_COMMITS: int
        CODEHEALTH_MAX_FILE_SIZE_MB: float
        CODEHEALTH_HISTORY_DIR: str
        CODEHEALTH_VERBOSITY: quiet/normal/verbose
        CODEHEALTH_LOG_FILE: str

    Returns:
        Dict of field_name -> parsed_value for any CODEHEALTH_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"CODEHEALTH_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field type is not env-configurable

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
