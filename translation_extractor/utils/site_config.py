import pathlib
from typing import Any, Dict

import frappe
from frappe.utils import get_bench_path

from ..config import ExtractorConfig
from ..errors import ConfigError

SITE_CONFIG_KEY = "translation_extractor"


def get_site_section() -> Dict[str, Any]:
    """Return the "translation_extractor" section of site_config.json (empty if unset)."""
    section = frappe.get_site_config().get(SITE_CONFIG_KEY) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"site_config.json key {SITE_CONFIG_KEY!r} must be an object")
    return dict(section)


def is_configured() -> bool:
    return bool(frappe.get_site_config().get(SITE_CONFIG_KEY))


def get_site_extractor_config() -> ExtractorConfig:
    """Build the extractor config of the current site.

    Example site_config.json entry (relative roots resolve against the bench directory):
        "translation_extractor": {
            "root": "apps/helpdesk/desk",
            "srcPath": "src",
            "translationsPath": "public/translations",
            "languages": ["en", "tr"]
        }
    """
    data = get_site_section()
    root = pathlib.Path(data.get("root") or ".")
    if not root.is_absolute():
        root = pathlib.Path(get_bench_path()) / root
    data["root"] = root
    return ExtractorConfig.from_mapping(data)
