"""
Logging helpers for translation_extractor.

- Inside a Frappe runtime, uses frappe.utils.logger.get_logger to create a site-scoped rotating log.
- Elsewhere (CLI, prebuild hook), logs plain text to stdout.
- ``verbose`` selects INFO, otherwise WARNING; the site config key
  "translation_extractor_log_level" (e.g. "DEBUG") overrides both.
"""

import json
import logging
import sys
from typing import Any

try:  # Frappe runtime
    import frappe  # type: ignore
    from frappe.utils.logger import get_logger  # type: ignore
except Exception:  # pragma: no cover
    frappe = None  # type: ignore
    get_logger = None  # type: ignore

LOGGER_NAME = "translation_extractor"


# ---------------------------
# Level helpers
# ---------------------------

def _level_from_string(level_str: str) -> int:
    """Map string level to logging constant; defaults to INFO on unknown."""
    level = getattr(logging, str(level_str).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def _in_site_context() -> bool:
    return frappe is not None and bool(getattr(getattr(frappe, "local", None), "site", None))


def _level_from_site_config(default: int) -> int:
    """Read desired log level from site_config.json (key: translation_extractor_log_level)."""
    if not _in_site_context():
        return default
    try:
        cfg = frappe.get_site_config()  # type: ignore[attr-defined]
    except Exception:
        return default
    if not isinstance(cfg, dict):
        return default
    val = cfg.get("translation_extractor_log_level")
    return _level_from_string(val) if val else default


# ---------------------------
# Public logger factory
# ---------------------------

def _stdout_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(h)
        logger.propagate = False
    return logger


def get_extractor_logger(verbose: bool = False, name: str = LOGGER_NAME) -> logging.Logger:
    """Create or return the extractor logger.

    Frappe v15 get_logger() writes to sites/<site>/logs/<name>.log and rotates it.
    """
    default = logging.INFO if verbose else logging.WARNING
    if _in_site_context() and get_logger is not None:
        logger = get_logger(name)
    else:
        logger = _stdout_logger(name)
    logger.setLevel(_level_from_site_config(default=default))
    return logger


# ---------------------------
# Format utilities
# ---------------------------

def compact_json(obj: Any, limit: int = 1200) -> str:
    """Compact JSON string for logging; truncate if too long."""
    try:
        s = json.dumps(obj, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
    except (TypeError, ValueError):
        s = str(obj)
    return s if len(s) <= limit else s[:limit] + "…(truncated)"
