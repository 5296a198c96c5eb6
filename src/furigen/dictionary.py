"""Locate the MeCab dictionary that supplies readings and pitch accents."""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass
from pathlib import Path

from .logging_utils import debug_log

DICTIONARY_DIR_ENV = "FURIGEN_UNIDIC_DIR"

# Packaged dictionaries, most complete first. ``unidic`` only counts once its
# data has been downloaded; ``unidic-lite`` ships its data in the wheel.
_PACKAGED_DICTIONARIES = (
    ("unidic", "unidic"),
    ("unidic_lite", "unidic-lite"),
)


@dataclass(frozen=True, slots=True)
class DictionaryLocation:
    source: str
    path: Path

    @property
    def packaged(self) -> bool:
        return self.source != "env"


def _is_dictionary_dir(path: Path) -> bool:
    return (path / "dicrc").is_file()


def _packaged_dicdir(module_name: str) -> Path | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    dicdir = getattr(module, "DICDIR", None)
    if not dicdir:
        return None
    path = Path(dicdir)
    return path if _is_dictionary_dir(path) else None


def locate_dictionary() -> DictionaryLocation | None:
    """Find a UniDic: ``FURIGEN_UNIDIC_DIR`` first, then the installed packages."""
    env_dir = os.environ.get(DICTIONARY_DIR_ENV)
    if env_dir:
        candidate = Path(env_dir).expanduser()
        if _is_dictionary_dir(candidate):
            return DictionaryLocation(source="env", path=candidate)
        debug_log(f"{DICTIONARY_DIR_ENV}={env_dir} has no dicrc; ignoring it")
    for module_name, source in _PACKAGED_DICTIONARIES:
        path = _packaged_dicdir(module_name)
        if path is not None:
            return DictionaryLocation(source=source, path=path)
    return None
