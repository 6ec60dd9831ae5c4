"""Editable ``.docx`` surface backed by python-docx.

New blocks are created through the regular python-docx API, which appends
them just before the section properties, and are then moved to the requested
insertion point. The cursor is the body element new ``cursor`` content goes
after; inserting at the cursor advances it to the last inserted block.
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import Iterator, Sequence

import httpx
from docx import Document
from docx.document import Document as DocxDocument
from docx.image.exceptions import UnrecognizedImageError
from docx.oxml.ns import qn
from docx.shared import Emu
from docx.table import Table
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from ..ai.tools.base import Location
from ..ai.tools.errors import ImageFetchError

LOGGER = logging.getLogger(__name__)

EMU_PER_PIXEL = 9525
TABLE_STYLE = "Table Grid"
IMAGE_FETCH_TIMEOUT = 30.0


class DocxDocumentSurface:
    """Document surface over a single ``.docx`` file.

    Example:
        >>> surface = DocxDocumentSurface("report.docx")
        >>> surface.insert_heading("Summary", level=1, location=Location.START)
        >>> surface.save()
    """

    def __init__(self, path: str | Path, *, http_client: httpx.Client | None = None) -> None:
        self._path = Path(path).expanduser()
        if self._path.exists():
            self._document: DocxDocument = Document(str(self._path))
        else:
            LOGGER.debug("Creating new document at %s", self._path)
            self._document = Document()
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._cursor = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def document(self) -> DocxDocument:
        return self._document

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------
    def set_cursor(self, paragraph_index: int | None) -> None:
        """Place the cursor after the paragraph at ``paragraph_index``.

        ``None`` clears the cursor so ``cursor`` insertions go to the end.

        Raises:
            IndexError: If the index does not name a body paragraph.
        """
        if paragraph_index is None:
            self._cursor = None
            return
        paragraphs = self._document.paragraphs
        if paragraph_index < 0 or paragraph_index >= len(paragraphs):
            raise IndexError(f"Paragraph index {paragraph_index} out of range (0..{len(paragraphs) - 1})")
        self._cursor = paragraphs[paragraph_index]._p

    # ------------------------------------------------------------------
    # DocumentSurface
    # ------------------------------------------------------------------
    def insert_text(self, text: str, *, location: Location) -> None:
        lines = text.splitlines() or [text]
        elements = [self._document.add_paragraph(line)._p for line in lines]
        self._place(elements, location)

    def insert_heading(self, text: str, *, level: int, location: Location) -> None:
        paragraph = self._document.add_paragraph(text, style=f"Heading {level}")
        self._place([paragraph._p], location)

    def replace_text(self, find: str, replace: str, *, pattern: re.Pattern[str] | None = None) -> int | None:
        total = 0
        for paragraph in self._iter_paragraphs():
            original = paragraph.text
            if pattern is not None:
                updated, count = pattern.subn(replace, original)
            else:
                count = original.count(find)
                updated = original.replace(find, replace) if count else original
            if count and updated != original:
                _set_paragraph_text(paragraph, updated)
            total += count
        LOGGER.debug("Replaced %d occurrence(s) in %s", total, self._path.name)
        return None if pattern is not None else total

    def insert_image(
        self,
        url: str,
        *,
        alt_text: str | None = None,
        width: float | None = None,
        height: float | None = None,
        location: Location,
    ) -> None:
        payload = self._fetch_image(url)
        paragraph = self._document.add_paragraph()
        try:
            shape = paragraph.add_run().add_picture(
                io.BytesIO(payload),
                width=_pixels_to_emu(width),
                height=_pixels_to_emu(height),
            )
        except UnrecognizedImageError as exc:
            paragraph._p.getparent().remove(paragraph._p)
            raise ImageFetchError(message=f"Unsupported image format at {url}", url=url) from exc
        if alt_text:
            shape._inline.docPr.set("descr", alt_text)
        self._place([paragraph._p], location)

    def insert_table(
        self,
        rows: int,
        cols: int,
        data: Sequence[Sequence[str]],
        *,
        location: Location,
    ) -> None:
        table = self._document.add_table(rows=rows, cols=cols)
        table.style = TABLE_STYLE
        for r, row in enumerate(data[:rows]):
            for c, value in enumerate(row[:cols]):
                table.cell(r, c).text = value
        self._place([table._tbl], location)

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._document.save(str(self._path))
        LOGGER.debug("Saved %s", self._path)

    def close(self) -> None:
        """Release the HTTP client when this surface created it."""
        if self._http_client is not None and self._owns_http_client:
            self._http_client.close()
        self._http_client = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _place(self, elements: list, location: Location) -> None:
        if not elements:
            return
        body = self._document.element.body
        if location is Location.START:
            body.insert(0, elements[0])
            _chain_after(elements[0], elements[1:])
        elif location is Location.CURSOR:
            if self._cursor is not None:
                _chain_after(self._cursor, elements)
            self._cursor = elements[-1]
        # END: python-docx already appended the blocks before sectPr.

    def _iter_paragraphs(self) -> Iterator[Paragraph]:
        yield from self._document.paragraphs
        for table in self._document.tables:
            yield from _table_paragraphs(table)

    def _fetch_image(self, url: str) -> bytes:
        client = self._http_client
        if client is None:
            client = httpx.Client(follow_redirects=True, timeout=IMAGE_FETCH_TIMEOUT)
            self._http_client = client
            self._owns_http_client = True
        try:
            response = client.get(url)
        except httpx.HTTPError as exc:
            raise ImageFetchError(message=f"Failed to fetch image {url}: {exc}", url=url) from exc
        if not response.is_success:
            raise ImageFetchError(
                message=f"Failed to fetch image {url}: HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return response.content


def _chain_after(anchor, elements) -> None:
    for element in elements:
        anchor.addnext(element)
        anchor = element


def _table_paragraphs(table: Table) -> Iterator[Paragraph]:
    seen: set[int] = set()
    for row in table.rows:
        for cell in row.cells:
            # Merged cells repeat across the grid.
            if id(cell._tc) in seen:
                continue
            seen.add(id(cell._tc))
            yield from cell.paragraphs
            for nested in cell.tables:
                yield from _table_paragraphs(nested)


def _set_paragraph_text(paragraph: Paragraph, text: str) -> None:
    # Keep the first run's formatting; drop the rest, hyperlink runs included.
    p = paragraph._p
    runs = p.xpath("./w:r | ./w:hyperlink/w:r")
    if not runs:
        paragraph.add_run(text)
        return
    first = runs[0]
    if first.getparent() is not p:
        # Lift the run out of its hyperlink.
        first.getparent().addprevious(first)
    Run(first, paragraph).text = text
    for r in runs[1:]:
        r.getparent().remove(r)
    for hyperlink in p.xpath("./w:hyperlink[not(w:r)]"):
        p.remove(hyperlink)


def _pixels_to_emu(value: float | None) -> Emu | None:
    if value is None:
        return None
    return Emu(int(round(value * EMU_PER_PIXEL)))


def image_descriptions(document: DocxDocument) -> list[str]:
    """Alt text of every inline image in body order."""
    return [
        element.get("descr", "")
        for element in document.element.body.iter(qn("wp:docPr"))
    ]


__all__ = ["DocxDocumentSurface", "EMU_PER_PIXEL", "TABLE_STYLE", "image_descriptions"]
