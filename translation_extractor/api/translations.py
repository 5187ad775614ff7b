from __future__ import annotations

from typing import Any, Dict

import frappe
from frappe.utils import cint

from translation_extractor.errors import SynchronizationFailed, TranslationExtractorError
from translation_extractor.plugin import TranslationExtractor
from translation_extractor.utils.logging import compact_json, get_extractor_logger
from translation_extractor.utils.site_config import get_site_extractor_config, is_configured


@frappe.whitelist()
def sync_translations(dry_run: int = 0, prune: int = 0) -> Dict[str, Any]:
    """Full extraction run for the site's configured frontend; returns the sync report."""
    frappe.only_for("System Manager")
    plugin = TranslationExtractor(get_site_extractor_config())
    try:
        report = plugin.build_start(dry_run=bool(cint(dry_run)), prune=bool(cint(prune)))
    except SynchronizationFailed as e:
        report = e.report
    except TranslationExtractorError as e:
        frappe.throw(str(e))
    return report.as_dict()


def after_migrate() -> None:
    """Sync translation files after `bench migrate`; never fails the migration.

    Can also be run via:
        bench execute translation_extractor.api.translations.after_migrate
    """
    logger = get_extractor_logger()
    if not is_configured():
        logger.debug("translation_extractor not configured for this site; skipping")
        return
    try:
        report = TranslationExtractor(get_site_extractor_config()).build_start()
    except SynchronizationFailed as e:
        logger.error("after_migrate: %s", e)
        return
    except TranslationExtractorError:
        logger.exception("after_migrate: translation sync failed")
        return
    logger.info("after_migrate: %d translation file(s) updated", len(report.written))
    logger.debug("after_migrate report: %s", compact_json(report.as_dict()))
