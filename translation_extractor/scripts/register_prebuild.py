#!/usr/bin/env python3
"""Hook the translation extractor into a JS project's build via package.json

npm, yarn and pnpm run `scripts.prebuild` before `scripts.build`, so a full
extraction there runs at every build start. The script:

- builds the command, adding `--config <path>` relative to the package.json when given
- puts it in front of any existing prebuild command (`cmd && existing`); re-running is a no-op
- keeps a copy of the untouched file as `package.json.<sha1[:8]>.bak`
- rewrites package.json atomically, 2-space indented

Usage:
    translation-extractor-register-prebuild --package web/package.json --config web/i18n.json

Without `--package` the package.json of the current directory is used.
"""
from __future__ import annotations

import argparse
import hashlib
import json
import os
import pathlib
import sys
from typing import Any, Dict, Optional, Tuple

from translation_extractor.sync import atomic_write

DEFAULT_COMMAND = "translation-extractor"


def short_digest(raw: bytes) -> str:
    return hashlib.sha1(raw).hexdigest()[:8]


def find_default_package_json() -> pathlib.Path:
    return pathlib.Path.cwd() / "package.json"


def build_prebuild_command(pkg_path: pathlib.Path, config: Optional[pathlib.Path] = None, command: str = DEFAULT_COMMAND) -> str:
    if config is None:
        return command
    # npm runs scripts from the package directory
    rel = os.path.relpath(config.resolve(), pkg_path.parent)
    return f"{command} --config {pathlib.Path(rel).as_posix()}"


def merge_prebuild(existing: Optional[str], prebuild_cmd: str) -> str:
    if not existing or not existing.strip():
        return prebuild_cmd
    if prebuild_cmd in (part.strip() for part in existing.split("&&")):
        return existing
    return f"{prebuild_cmd} && {existing}"


def read_package(pkg_path: pathlib.Path) -> Tuple[bytes, Dict[str, Any]]:
    """Return the raw bytes and parsed object of a package.json; ValueError if it is not a JSON object."""
    raw = pkg_path.read_bytes()
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return raw, data


def write_backup(pkg_path: pathlib.Path, raw: bytes) -> pathlib.Path:
    backup = pkg_path.with_name(f"{pkg_path.name}.{short_digest(raw)}.bak")
    if backup.exists():
        print(f"Backup already exists: {backup}")
    else:
        backup.write_bytes(raw)
        print(f"Backup written: {backup}")
    return backup


def main(argv: Optional[list] = None) -> int:
    ap = argparse.ArgumentParser(prog="translation-extractor-register-prebuild")
    ap.add_argument("--package", "-p", help="package.json to update (default: ./package.json)")
    ap.add_argument("--config", "-c", help="Extractor config file to pass with --config (optional)")
    ap.add_argument("--command", default=DEFAULT_COMMAND, help="Extractor executable (default: translation-extractor)")
    args = ap.parse_args(argv)

    pkg_path = (pathlib.Path(args.package) if args.package else find_default_package_json()).resolve()
    if not pkg_path.is_file():
        print(f"No package.json at {pkg_path}", file=sys.stderr)
        return 2

    config = pathlib.Path(args.config) if args.config else None
    if config is not None and not config.is_file():
        print(f"No config file at {config}", file=sys.stderr)
        return 2

    try:
        raw, data = read_package(pkg_path)
    except ValueError as e:
        print(f"Cannot use {pkg_path}: {e}", file=sys.stderr)
        return 2

    scripts = data.setdefault("scripts", {})
    current = scripts.get("prebuild")
    merged = merge_prebuild(current, build_prebuild_command(pkg_path, config, args.command))
    if merged == current:
        print(f"Nothing to do, prebuild is: {current}")
        return 0

    write_backup(pkg_path, raw)
    scripts["prebuild"] = merged
    atomic_write(pkg_path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    print(f"{pkg_path}: scripts.prebuild = {merged}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
