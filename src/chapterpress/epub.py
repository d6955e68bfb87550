"""Assemble EPUB 3 archives (with an EPUB 2 NCX) from chapter trees."""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Final, Iterable, Sequence

from chapterpress.assets import image_mime_for_name
from chapterpress.config import CHAPTERPRESS_EPUB_LANGUAGE
from chapterpress.exceptions import StorageError
from chapterpress.identifiers import (
    date_stamp,
    generate_package_uuid,
    manifest_id,
    sanitize_asset_name,
    sanitize_export_title,
)
from chapterpress.schemas.document import (
    Block,
    Blockquote,
    BulletList,
    ColorBleed,
    Document,
    ImageBleed,
    OrderedList,
)
from chapterpress.utils.logging_config import get_logger
from chapterpress.xhtml import chapter_to_xhtml, escape_xml

logger = get_logger(__name__)

MIMETYPE: Final[str] = "application/epub+zip"

CONTAINER_XML: Final[str] = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">\n'
    "  <rootfiles>\n"
    '    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>\n'
    "  </rootfiles>\n"
    "</container>"
)

EPUB_CSS: Final[str] = """\
body { font-family: %(font)s; font-size: 1em; line-height: 1.6; margin: 0; padding: 0; }
p { margin: 0 0 1em; orphans: 2; widows: 2; }
h2 { font-size: 1.5em; font-weight: bold; margin: 1.5em 0 0.5em; page-break-after: avoid; }
h3 { font-size: 1.3em; font-weight: bold; margin: 1.5em 0 0.5em; page-break-after: avoid; }
h4 { font-size: 1.1em; font-weight: bold; margin: 1.5em 0 0.5em; page-break-after: avoid; }
h5 { font-size: 1em;   font-weight: bold; margin: 1.5em 0 0.5em; page-break-after: avoid; }
h6 { font-size: 0.9em; font-weight: bold; margin: 1.5em 0 0.5em; page-break-after: avoid; }
blockquote { margin: 1em 2em; font-style: italic; }
ul, ol { margin: 0 0 1em; padding-left: 2em; }
li { margin: 0.25em 0; }
hr { border: none; border-top: 1px solid #ccc; margin: 2em 0; }
pre { white-space: pre-wrap; margin: 0 0 1em; }
strong { font-weight: bold; }
em { font-style: italic; }
s { text-decoration: line-through; }
code { font-family: monospace; font-size: 0.9em; }
div.image-bleed { margin: 1em 0; text-align: center; }
div.image-bleed img { max-width: 100%%; }
"""


@dataclass(frozen=True)
class EpubChapter:
    """One chapter as it goes into the book."""

    title: str
    document: Document | None


def chapter_href(index: int) -> str:
    """Path (relative to ``OEBPS/``) of the 1-based ``index``-th chapter."""
    return f"chapters/ch{index:03d}.xhtml"


def build_stylesheet(font_family: str | None = None) -> str:
    font = f'"{font_family}", serif' if font_family else "serif"
    return EPUB_CSS % {"font": font}


def collect_image_names(documents: Iterable[Document | None]) -> list[str]:
    """Asset names referenced by image bleeds, in first-seen order, without repeats."""
    names: list[str] = []
    for document in documents:
        if document is not None:
            _collect_from_blocks(document.content, names)
    return names


def _collect_from_blocks(blocks: Iterable[Block], names: list[str]) -> None:
    for block in blocks:
        if isinstance(block, ImageBleed):
            if block.attrs.name and block.attrs.name not in names:
                names.append(block.attrs.name)
        elif isinstance(block, (Blockquote, ColorBleed)):
            _collect_from_blocks(block.content, names)
        elif isinstance(block, (BulletList, OrderedList)):
            for item in block.content:
                _collect_from_blocks(item.content, names)


def build_opf(
    title: str,
    author: str,
    uuid: str,
    modified: str,
    chapter_count: int,
    images: Sequence[str],
    language: str = CHAPTERPRESS_EPUB_LANGUAGE,
) -> str:
    """Build the package document (metadata, manifest and spine)."""
    author_el = f"    <dc:creator>{escape_xml(author)}</dc:creator>\n" if author else ""
    chapter_items = "".join(
        f'    <item id="ch{i:03d}" href="{chapter_href(i)}" media-type="application/xhtml+xml"/>\n'
        for i in range(1, chapter_count + 1)
    )
    image_items = "".join(
        f'    <item id="img-{manifest_id(name)}" href="images/{escape_xml(name)}" '
        f'media-type="{image_mime_for_name(name)}"/>\n'
        for name in images
    )
    spine = "".join(f'    <itemref idref="ch{i:03d}"/>\n' for i in range(1, chapter_count + 1))
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="book-id">\n'
        '  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">\n'
        f'    <dc:identifier id="book-id">urn:uuid:{uuid}</dc:identifier>\n'
        f"    <dc:title>{escape_xml(title)}</dc:title>\n"
        f"{author_el}"
        f"    <dc:language>{escape_xml(language)}</dc:language>\n"
        f'    <meta property="dcterms:modified">{modified}</meta>\n'
        "  </metadata>\n"
        "  <manifest>\n"
        '    <item id="nav" href="nav.xhtml" media-type="application/xhtml+xml" properties="nav"/>\n'
        '    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>\n'
        '    <item id="css" href="style.css" media-type="text/css"/>\n'
        f"{chapter_items}{image_items}"
        "  </manifest>\n"
        '  <spine toc="ncx">\n'
        f"{spine}"
        "  </spine>\n"
        "</package>"
    )


def build_nav(title: str, chapter_titles: Sequence[str]) -> str:
    """Build the EPUB 3 navigation document."""
    items = "".join(
        f'      <li><a href="{chapter_href(i)}">{escape_xml(chapter_title)}</a></li>\n'
        for i, chapter_title in enumerate(chapter_titles, start=1)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<!DOCTYPE html>\n"
        '<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">\n'
        f"<head><title>{escape_xml(title)}</title></head>\n"
        "<body>\n"
        '  <nav epub:type="toc">\n'
        f"    <h1>{escape_xml(title)}</h1>\n"
        "    <ol>\n"
        f"{items}"
        "    </ol>\n"
        "  </nav>\n"
        "</body>\n"
        "</html>"
    )


def build_ncx(title: str, uuid: str, chapter_titles: Sequence[str]) -> str:
    """Build the EPUB 2 table of contents."""
    nav_points = "".join(
        f'    <navPoint id="ch{i:03d}" playOrder="{i}">\n'
        f"      <navLabel><text>{escape_xml(chapter_title)}</text></navLabel>\n"
        f'      <content src="{chapter_href(i)}"/>\n'
        "    </navPoint>\n"
        for i, chapter_title in enumerate(chapter_titles, start=1)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">\n'
        "  <head>\n"
        f'    <meta name="dtb:uid" content="urn:uuid:{uuid}"/>\n'
        '    <meta name="dtb:depth" content="1"/>\n'
        '    <meta name="dtb:totalPageCount" content="0"/>\n'
        '    <meta name="dtb:maxPageNumber" content="0"/>\n'
        "  </head>\n"
        f"  <docTitle><text>{escape_xml(title)}</text></docTitle>\n"
        "  <navMap>\n"
        f"{nav_points}"
        "  </navMap>\n"
        "</ncx>"
    )


def is_safe_image_name(name: str) -> bool:
    """True for a bare asset filename that cannot leave the asset directory."""
    return bool(name.strip(".")) and sanitize_asset_name(name) == name


def _read_images(assets_dir: Path, names: Sequence[str]) -> list[tuple[str, bytes]]:
    images: list[tuple[str, bytes]] = []
    for name in names:
        if not is_safe_image_name(name):
            logger.debug("Unsafe image name, skipped", extra={"image": name})
            continue
        path = assets_dir / name
        if not path.is_file():
            logger.debug("Referenced image missing, skipped", extra={"image": name, "assets_dir": str(assets_dir)})
            continue
        try:
            images.append((name, path.read_bytes()))
        except OSError as exc:
            raise StorageError("read image", path, exc) from exc
    return images


def build_epub(
    title: str,
    author: str,
    chapters: Sequence[EpubChapter],
    assets_dir: Path,
    *,
    font_family: str | None = None,
    language: str = CHAPTERPRESS_EPUB_LANGUAGE,
    now: datetime | None = None,
) -> bytes:
    """Package chapters into an EPUB archive held in memory.

    Args:
        title: Book title; also seeds the package identifier.
        author: Author name; omitted from metadata when empty.
        chapters: Chapters in reading order.
        assets_dir: Directory holding images referenced by image bleeds.
            Referenced images that do not exist there, or whose names are not
            bare asset filenames, are left out.
        font_family: Body font for the stylesheet; serif when unset.
        language: ``dc:language`` value.
        now: Timestamp used for the identifier and ``dcterms:modified``.

    Returns:
        The archive bytes, ``mimetype`` first and stored uncompressed.

    Raises:
        StorageError: If a referenced image exists but cannot be read.
    """
    now = now or datetime.now(timezone.utc)
    uuid = generate_package_uuid(title, int(now.timestamp() * 1000))
    modified = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    images = _read_images(assets_dir, collect_image_names(chapter.document for chapter in chapters))
    chapter_titles = [chapter.title for chapter in chapters]

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("mimetype", MIMETYPE, compress_type=zipfile.ZIP_STORED)

        def add(name: str, data: str | bytes) -> None:
            archive.writestr(name, data, compress_type=zipfile.ZIP_DEFLATED)

        add("META-INF/container.xml", CONTAINER_XML)
        add("OEBPS/style.css", build_stylesheet(font_family))
        for name, data in images:
            add(f"OEBPS/images/{name}", data)
        for index, chapter in enumerate(chapters, start=1):
            add(f"OEBPS/{chapter_href(index)}", chapter_to_xhtml(chapter.title, chapter.document))
        add("OEBPS/nav.xhtml", build_nav(title, chapter_titles))
        add("OEBPS/toc.ncx", build_ncx(title, uuid, chapter_titles))
        add(
            "OEBPS/content.opf",
            build_opf(
                title,
                author,
                uuid,
                modified,
                len(chapters),
                [name for name, _ in images],
                language,
            ),
        )

    logger.info(
        "Built EPUB",
        extra={"title": title, "chapters": len(chapters), "images": len(images)},
    )
    return buffer.getvalue()


def epub_filename(title: str, today: date | None = None) -> str:
    """``<sanitized-title>_<YYYY-MM-DD>.epub``."""
    return f"{sanitize_export_title(title)}_{date_stamp(today)}.epub"
