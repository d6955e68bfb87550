"""Chapter splitting and title utilities."""

from __future__ import annotations

from typing import Collection


def default_chapter_title(number: int) -> str:
    return f"Chapter {number}"


def split_by_delimiter(
    text: str,
    delimiter: str,
    *,
    extract_titles: bool = False,
) -> list[tuple[str, str]]:
    """Split text into ``(title, content)`` sections at delimiter lines.

    A delimiter line is any line starting with ``delimiter``. Lines before the
    first delimiter are discarded. With ``extract_titles`` the rest of the
    delimiter line becomes the section title and sections with no content are
    dropped; without it every section is titled ``Chapter N`` and kept even
    when empty. If no section survives, the whole text becomes ``Chapter 1``.

    Args:
        text: Raw file content.
        delimiter: Literal prefix that marks the start of a section.
        extract_titles: Take titles from the delimiter lines.

    Returns:
        Sections in input order.
    """
    sections: list[tuple[str, str]] = []
    current_title: str | None = None
    current_lines: list[str] = []

    def close_current() -> None:
        if current_title is None:
            return
        content = "\n".join(current_lines).strip()
        if content or not extract_titles:
            sections.append((current_title, content))

    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if line.startswith(delimiter):
            close_current()
            remainder = line[len(delimiter) :].strip() if extract_titles else ""
            current_title = remainder or default_chapter_title(len(sections) + 1)
            current_lines = []
        elif current_title is not None:
            current_lines.append(line)

    close_current()

    if not sections:
        return [(default_chapter_title(1), text)]
    return sections


def dedupe_title(candidate: str, used_lower: Collection[str]) -> str:
    """Return a title whose lowercase form is not in ``used_lower``.

    ``candidate`` is returned unchanged when free, otherwise ``"candidate (n)"``
    with the smallest free ``n``. Callers add the chosen title (lowercased) to
    their set before asking again.
    """
    if candidate.lower() not in used_lower:
        return candidate
    n = 1
    while True:
        numbered = f"{candidate} ({n})"
        if numbered.lower() not in used_lower:
            return numbered
        n += 1
