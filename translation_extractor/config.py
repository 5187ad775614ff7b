"""Extractor options.

Options can be given directly, or read from a mapping that uses either the
snake_case field names or the camelCase names of the JS build plugin::

    {"srcPath": "src", "translationsPath": "public/translations",
     "languages": ["en", "it"], "functionName": "t", "verbose": false}

A ``package.json`` is accepted as config file; its ``translationExtractor``
section holds the options.
"""
from __future__ import annotations

import dataclasses
import json
import pathlib
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import ConfigError

PACKAGE_JSON_SECTION = "translationExtractor"

_ALIASES = {
    "srcPath": "src_path",
    "translationsPath": "translations_path",
    "functionName": "function_name",
}


def _split_csv(value: Union[str, Any]) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(v.strip() for v in value.split(",") if v.strip())
    return tuple(str(v) for v in value)


@dataclasses.dataclass
class ExtractorConfig:
    root: pathlib.Path = dataclasses.field(default_factory=pathlib.Path.cwd)
    src_path: str = "src"
    translations_path: str = "public/translations"
    languages: Tuple[str, ...] = ("en", "it")
    function_name: str = "t"
    verbose: bool = False
    # per-key "context" option routes keys to <translations>/<context>/<lang>.json
    contexts: bool = False
    ignore: Tuple[str, ...] = ()
    strict: bool = True

    def __post_init__(self) -> None:
        self.root = pathlib.Path(self.root)
        self.languages = _split_csv(self.languages)
        self.ignore = _split_csv(self.ignore)
        if not self.languages:
            raise ConfigError("At least one language is required")
        if not self.function_name:
            raise ConfigError("function_name must not be empty")

    @property
    def src_dir(self) -> pathlib.Path:
        return (self.root / self.src_path).resolve()

    @property
    def translations_dir(self) -> pathlib.Path:
        return (self.root / self.translations_path).resolve()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **overrides: Any) -> "ExtractorConfig":
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in field_names:
                kwargs[name] = value
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "ExtractorConfig":
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})


def read_config_file(path: Union[str, pathlib.Path]) -> Dict[str, Any]:
    """Return the option mapping stored in a JSON config file or package.json."""
    p = pathlib.Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {p}")
    except (OSError, ValueError) as e:
        raise ConfigError(f"Failed to parse {p}: {e}")
    if p.name == "package.json":
        data = data.get(PACKAGE_JSON_SECTION, {}) if isinstance(data, dict) else None
    if not isinstance(data, dict):
        raise ConfigError(f"Config in {p} must be a JSON object")
    return data


def load_config(path: Optional[Union[str, pathlib.Path]] = None, **overrides: Any) -> ExtractorConfig:
    """Build a config from ``path`` (if given) and keyword overrides.

    Relative paths in the file resolve against the file's directory unless
    ``root`` is overridden.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        data = read_config_file(path)
        base = pathlib.Path(path).resolve().parent
        data["root"] = base / data.get("root", ".")
    return ExtractorConfig.from_mapping(data, **overrides)
