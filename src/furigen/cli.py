from __future__ import annotations

import argparse
import sys
from importlib import metadata
from pathlib import Path

import tomllib
from rich.console import Console

from .annotator import Annotator, AnnotatorConfig, AnnotatorUnavailableError, FugashiAnnotator
from .archive import InvalidEpubError, rewrite_epub
from .defaults import (
    DEFAULT_ACCENT_MARKER,
    DEFAULT_FLAT_MARKER,
    DEFAULT_FORGET_DISTANCE,
    DEFAULT_MIN_EXPOSURES,
)
from .dictionary import DICTIONARY_DIR_ENV, locate_dictionary
from .logging_utils import make_console, set_debug_logging
from .pitch import PitchMarkers
from .session import LearningSession, LearnPolicy
from .stats import write_word_stats


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("furigen")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"furigen {__version__}",
    )


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {parsed}")
    return parsed


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {parsed}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="furigen",
        description="Add furigana to the Japanese text of an EPUB. Use `furigen tools dictionary-status` to see which dictionary is used.",
    )
    _add_version_flag(ap)
    ap.add_argument("input_path", metavar="IN_EPUB_FILE", help="Path to the input epub file.")
    ap.add_argument("output_path", metavar="OUT_EPUB_FILE", help="Path to write the processed epub file to.")
    ap.add_argument(
        "-p",
        "--pitch-accent",
        action="store_true",
        help=(
            "When adding furigana to a word, include a pitch accent marker when the accent is "
            "unambiguous. The accent marker follows the accented mora, the flat marker indicates "
            "flat pitch (heiban)."
        ),
    )
    ap.add_argument(
        "--accent-marker",
        default=DEFAULT_ACCENT_MARKER,
        help="Marker placed after the accented mora (default: %(default)s).",
    )
    ap.add_argument(
        "--flat-marker",
        default=DEFAULT_FLAT_MARKER,
        help="Marker appended to readings with flat pitch (default: %(default)s).",
    )
    ap.add_argument(
        "-x",
        "--furigana-exclude",
        type=_non_negative_int,
        metavar="N",
        help="Don't add furigana to words made up of the first N most common kanji.",
    )
    ap.add_argument(
        "-k",
        "--known-words",
        metavar="FILE",
        help="Don't add furigana to words listed (whitespace separated) in this text file.",
    )
    ap.add_argument(
        "-l",
        "--learn-mode",
        action="store_true",
        help=(
            "Put furigana on words in a spaced-repetition style, so words that show up "
            "frequently lose their furigana as the book goes on."
        ),
    )
    ap.add_argument(
        "-s",
        "--word-stats",
        action="store_true",
        help=(
            "When using learn mode, write OUT_EPUB_FILE.word_stats.txt listing every word "
            "parsed with its longest gap and occurrence count."
        ),
    )
    ap.add_argument(
        "--min-exposures",
        type=_positive_int,
        default=DEFAULT_MIN_EXPOSURES,
        help="Learn mode: occurrences needed before furigana can be dropped (default: %(default)s).",
    )
    ap.add_argument(
        "--forget-distance",
        type=_positive_int,
        default=DEFAULT_FORGET_DISTANCE,
        help=(
            "Learn mode: a word not seen for this many words gets its furigana back "
            "(default: %(default)s)."
        ),
    )
    ap.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging (entry roles, hidden furigana).",
    )
    return ap


def build_tools_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="furigen tools", description="furigen helper utilities")
    _add_version_flag(ap)
    subparsers = ap.add_subparsers(dest="tool_cmd")
    subparsers.add_parser(
        "dictionary-status",
        help=f"Show which UniDic dictionary will be used (override with {DICTIONARY_DIR_ENV}).",
    )
    return ap


def load_known_words(path: str | None, console: Console | None = None) -> frozenset[str]:
    """Read whitespace-separated words; a missing file counts as an empty list."""
    if not path:
        return frozenset()
    try:
        text = Path(path).expanduser().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        if console is not None:
            console.print(f"Warning: could not read known words file {path} ({exc}); continuing without it.", markup=False)
        return frozenset()
    return frozenset(word for word in text.split() if word)


def _build_annotator() -> Annotator:
    return FugashiAnnotator()


def _run_tools(args: argparse.Namespace) -> int:
    if args.tool_cmd == "dictionary-status":
        location = locate_dictionary()
        if location is None:
            print("UniDic not detected; the default MeCab dictionary will be used (no pitch accents).")
            return 1
        print(f"UniDic ({location.source}): {location.path}")
        return 0
    build_tools_parser().print_help()
    return 0


def _run_furigana(args: argparse.Namespace) -> int:
    if args.word_stats and not args.learn_mode:
        raise SystemExit("Error: outputting word stats requires learn mode to be enabled.")

    inp_path = Path(args.input_path)
    if not inp_path.exists():
        raise SystemExit(f"Error: input path not found: {inp_path}")
    out_path = Path(args.output_path)
    if out_path.exists() and out_path.resolve() == inp_path.resolve():
        raise SystemExit("Error: the output path must differ from the input path.")

    set_debug_logging(bool(args.debug))
    console = make_console()

    config = AnnotatorConfig(
        exclude_top_n=args.furigana_exclude or 0,
        known_words=load_known_words(args.known_words, console),
        pitch_markers=PitchMarkers(args.accent_marker, args.flat_marker) if args.pitch_accent else None,
    )
    try:
        annotator = _build_annotator()
    except AnnotatorUnavailableError as exc:
        raise SystemExit(str(exc)) from exc
    session = LearningSession(
        annotator,
        config,
        learn_mode=args.learn_mode,
        policy=LearnPolicy(min_exposures=args.min_exposures, forget_distance=args.forget_distance),
    )

    try:
        rewrite_epub(inp_path, out_path, session, console=console)
    except InvalidEpubError as exc:
        raise SystemExit(str(exc)) from exc

    if args.word_stats:
        stats_path = write_word_stats(out_path, session.word_stats())
        console.print(f"Wrote word stats to {stats_path}", markup=False)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] == "tools":
        tools_args = build_tools_parser().parse_args(argv[1:])
        return _run_tools(tools_args)

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    args = parser.parse_args(argv)
    return _run_furigana(args)


if __name__ == "__main__":
    raise SystemExit(main())
