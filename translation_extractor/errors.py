"""Exceptions raised by the extractor, the synchronizer and the plugin."""
from __future__ import annotations

from typing import Any, Optional

__all__ = [
    "TranslationExtractorError",
    "SourceReadError",
    "ParseError",
    "TranslationFileCorrupt",
    "WriteError",
    "SynchronizationFailed",
    "ConfigError",
]


class TranslationExtractorError(Exception):
    """Base exception for translation_extractor."""


class ConfigError(TranslationExtractorError):
    """Raised when the extractor configuration is missing or invalid."""


class SourceReadError(TranslationExtractorError):
    """Raised when a source file cannot be read or decoded."""

    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(TranslationExtractorError):
    """Raised when a source file does not parse cleanly."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None, path: Any = None) -> None:
        location = ""
        if line is not None:
            location = f" at line {line}, column {column}"
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}{message}{location}")
        self.line = line
        self.column = column
        self.path = path


class TranslationFileCorrupt(TranslationExtractorError):
    """Raised when an existing translation file is not a JSON object."""

    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"Translation file {path} is not valid: {reason}")
        self.path = path
        self.reason = reason


class WriteError(TranslationExtractorError):
    """Raised when a translation file could not be created or written."""

    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path
        self.reason = reason


class SynchronizationFailed(TranslationExtractorError):
    """Raised after a run in which one or more translation files failed."""

    def __init__(self, report: Any) -> None:
        failed = [str(o.path) for o in report.failed]
        super().__init__(f"{len(failed)} translation file(s) could not be updated: {', '.join(failed)}")
        self.report = report
