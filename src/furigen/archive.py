from __future__ import annotations

import os
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import IO, Iterator, Union

from rich.console import Console

from .defaults import EPUB_MIMETYPE, PITCH_ACCENT_CSS
from .logging_utils import debug_log, make_console
from .session import LearningSession

__all__ = [
    "InvalidEpubError",
    "EntryRole",
    "ArchiveEntry",
    "Decoded",
    "Opaque",
    "Payload",
    "classify_entry",
    "decode_payload",
    "validate_container",
    "read_entries",
    "transform_entry",
    "rewrite_epub",
]

HTML_EXTS = (".html", ".xhtml")
CSS_EXTS = (".css",)
MIMETYPE_NAME = "mimetype"

ArchiveSource = Union[str, "os.PathLike[str]", IO[bytes]]


class InvalidEpubError(ValueError):
    """Raised when the input is not a zip whose first entry is ``mimetype``."""


class EntryRole(str, Enum):
    MIMETYPE = "mimetype"
    HTML = "html"
    CSS = "css"
    OTHER = "other"


@dataclass(frozen=True)
class ArchiveEntry:
    path: str
    data: bytes
    role: EntryRole
    date_time: tuple[int, int, int, int, int, int] = (1980, 1, 1, 0, 0, 0)
    external_attr: int = 0


@dataclass(frozen=True)
class Decoded:
    text: str


@dataclass(frozen=True)
class Opaque:
    data: bytes


Payload = Union[Decoded, Opaque]


def classify_entry(path: str, index: int | None = None) -> EntryRole:
    if index == 0 and path == MIMETYPE_NAME:
        return EntryRole.MIMETYPE
    if path.endswith(HTML_EXTS) and "nav" not in path:
        return EntryRole.HTML
    if path.endswith(CSS_EXTS):
        return EntryRole.CSS
    return EntryRole.OTHER


def decode_payload(data: bytes) -> Payload:
    try:
        return Decoded(data.decode("utf-8"))
    except UnicodeDecodeError:
        return Opaque(data)


def _is_enclosed_name(name: str) -> bool:
    if not name or name.startswith(("/", "\\")):
        return False
    parts = PurePosixPath(name.replace("\\", "/")).parts
    if parts and parts[0].endswith(":"):
        return False
    return ".." not in parts


def validate_container(zf: zipfile.ZipFile) -> zipfile.ZipInfo:
    infos = zf.infolist()
    if not infos:
        raise InvalidEpubError("Not a valid epub file: the archive is empty.")
    first = infos[0]
    if first.filename != MIMETYPE_NAME:
        raise InvalidEpubError(
            f"Not a valid epub file: first entry is '{first.filename}', expected '{MIMETYPE_NAME}'."
        )
    return first


def read_entries(zf: zipfile.ZipFile) -> Iterator[ArchiveEntry]:
    """Yield the file entries after ``mimetype`` in storage order."""
    validate_container(zf)
    for index, info in enumerate(zf.infolist()):
        if index == 0 or info.is_dir():
            continue
        if not _is_enclosed_name(info.filename):
            debug_log(f"skipping entry with unsafe path: {info.filename!r}")
            continue
        if info.filename == MIMETYPE_NAME:
            debug_log("skipping duplicate mimetype entry")
            continue
        yield ArchiveEntry(
            path=info.filename,
            data=zf.read(info),
            role=classify_entry(info.filename, index),
            date_time=info.date_time,
            external_attr=info.external_attr,
        )


def transform_entry(entry: ArchiveEntry, session: LearningSession) -> bytes:
    if entry.role is EntryRole.HTML:
        payload = decode_payload(entry.data)
        if isinstance(payload, Decoded):
            return session.process_document(payload.text).encode("utf-8")
        debug_log(f"{entry.path} is not UTF-8; copied unchanged")
        return payload.data
    if entry.role is EntryRole.CSS:
        payload = decode_payload(entry.data)
        if isinstance(payload, Decoded):
            return (payload.text + PITCH_ACCENT_CSS).encode("utf-8")
        debug_log(f"{entry.path} is not UTF-8; copied unchanged")
        return payload.data
    return entry.data


def _open_input(source: ArchiveSource) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(source, "r")
    except zipfile.BadZipFile as exc:
        raise InvalidEpubError(f"Not a valid epub file: {exc}") from exc


def rewrite_epub(
    source: ArchiveSource,
    destination: ArchiveSource,
    session: LearningSession,
    *,
    console: Console | None = None,
) -> int:
    """
    Copy ``source`` to ``destination`` with furigana added to its documents.

    The container is validated before ``destination`` is opened. The
    mimetype entry is written first and stored uncompressed; every other
    entry is deflated and keeps its path. Returns the number of entries
    written after the mimetype.
    """
    console = console or make_console()
    with _open_input(source) as zin:
        mimetype_info = validate_container(zin)
        written = 0
        with zipfile.ZipFile(destination, "w") as zout:
            info = zipfile.ZipInfo(MIMETYPE_NAME, date_time=mimetype_info.date_time)
            info.compress_type = zipfile.ZIP_STORED
            zout.writestr(info, EPUB_MIMETYPE)
            for entry in read_entries(zin):
                console.print(f"Writing {entry.path}", markup=False)
                debug_log(f"{entry.path}: {entry.role.value}")
                info = zipfile.ZipInfo(entry.path, date_time=entry.date_time)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = entry.external_attr or (0o644 << 16)
                zout.writestr(info, transform_entry(entry, session))
                written += 1
    return written
