"""Repository scanning: file enumeration and language detection."""

from .languages import LANGUAGES, LanguageConfig, detect_language
from .models import FileRecord, ScanResult
from .scanner import RepositoryScanner

__all__ = [
    "FileRecord",
    "ScanResult",
    "RepositoryScanner",
    "LanguageConfig",
    "LANGUAGES",
    "detect_language",
]
