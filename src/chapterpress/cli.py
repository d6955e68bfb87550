"""Command line entry point for chapterpress."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from chapterpress.assets import copy_asset_and_encode
from chapterpress.exceptions import ChapterpressError
from chapterpress.export import export_epub, export_rtf
from chapterpress.ingestion import ImportOptions, import_chapters
from chapterpress.markdown import convert_markdown_to_document
from chapterpress.plain_text import convert_text_to_document
from chapterpress.schemas import dump_document
from chapterpress.settings import JsonSettingsStore, remember_project, resolve_font_family
from chapterpress.storage import ProjectStore
from chapterpress.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chapterpress", description="Convert and export chapter-based manuscripts.")
    parser.add_argument("--log-level", help="Logging level (defaults to CHAPTERPRESS_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Print the document tree for a text or Markdown file")
    convert.add_argument("file", type=Path)
    convert.add_argument("--markdown", action="store_true", help="Parse as Markdown regardless of extension")

    import_ = subparsers.add_parser("import", help="Import files into a project as chapters")
    import_.add_argument("project", type=Path)
    import_.add_argument("files", nargs="+", type=Path)
    import_.add_argument("--use-filename", action="store_true", help="Title unsplit files by their filename")
    import_.add_argument("--delimiter", help="Line prefix that starts a new chapter")
    import_.add_argument("--extract-titles", action="store_true", help="Take titles from delimiter lines")

    for name, help_text in (("export-rtf", "Export chapters to RTF"), ("export-epub", "Export chapters to EPUB")):
        export = subparsers.add_parser(name, help=help_text)
        export.add_argument("project", type=Path)
        export.add_argument("--out", type=Path, help="Export directory (defaults to the project's)")
        export.add_argument("--chapters", type=int, nargs="*", default=[], help="Chapter ids to export")
        if name == "export-epub":
            export.add_argument("--font", help="Body font family")

    asset = subparsers.add_parser("add-asset", help="Copy an image into a project's assets")
    asset.add_argument("project", type=Path)
    asset.add_argument("image", type=Path)
    return parser


def _convert(args: argparse.Namespace) -> None:
    text = args.file.read_text(encoding="utf-8")
    if args.markdown or args.file.suffix.lower() == ".md":
        document = convert_markdown_to_document(text)
    else:
        document = convert_text_to_document(text)
    print(json.dumps(dump_document(document), indent=2, ensure_ascii=False))


def _import(args: argparse.Namespace) -> None:
    store = ProjectStore(args.project)
    if not store.exists():
        store = ProjectStore.create(args.project, title=args.project.resolve().name)
    options = ImportOptions(
        use_filename_as_title=args.use_filename,
        chapter_delimiter=args.delimiter,
        extract_title_from_delimiter=args.extract_titles,
    )
    result = import_chapters(store, args.files, options)
    store.update_chapter_index(result.chapter_order, result.chapter_titles)
    remember_project(JsonSettingsStore(), store.root)
    for chapter in result.chapters:
        print(f"{chapter.id}\t{chapter.title}")


def _export(args: argparse.Namespace) -> None:
    store = ProjectStore(args.project)
    export_dir = args.out or store.default_export_dir()
    if args.command == "export-rtf":
        path = export_rtf(store, export_dir, args.chapters)
    else:
        font = resolve_font_family(args.font or store.load_record().font_family, JsonSettingsStore().load())
        path = export_epub(store, export_dir, args.chapters, font_family=font)
    if args.out:
        store.update_export_dir(args.out)
    print(path)


def _add_asset(args: argparse.Namespace) -> None:
    store = ProjectStore(args.project)
    result = copy_asset_and_encode(store.assets_dir, args.image)
    print(result.name)


_COMMANDS = {
    "convert": _convert,
    "import": _import,
    "export-rtf": _export,
    "export-epub": _export,
    "add-asset": _add_asset,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper() if args.log_level else None)

    try:
        _COMMANDS[args.command](args)
    except (ChapterpressError, OSError) as exc:
        logger.error("Command failed", extra={"command": args.command, "error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
