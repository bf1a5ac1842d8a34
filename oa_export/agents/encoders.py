from __future__ import annotations
import csv
import io
import re
from typing import Iterable, List, Sequence

from docx import Document
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Twips

from ..config import (
    DOCX_BORDER_COLOR,
    DOCX_COLUMN_PERCENTS,
    DOCX_HEADER_FILL,
    DOCX_TABLE_WIDTH_TWIPS,
    EXPORT_HEADERS,
    PLACEHOLDER,
)
from ..models import Record
from ..utils.normalise import strip_unencodable

# ---- CSV ----

def _csv_row(r: Record) -> List[str]:
    return [strip_unencodable(v) for v in (r.year_text, r.authors, r.title, r.url or "")]

def encode_csv(records: Iterable[Record]) -> bytes:
    """
    Serialises records as UTF-8 CSV.

    Every field, header included, is quoted and embedded quotes are doubled,
    so titles like 'A "Great" Book, Vol. 1' survive a round trip through any
    CSV reader. Rows are joined with "\\n" and there is no trailing newline.

    Args:
        records (Iterable[Record]): Canonical records to write.

    Returns:
        bytes: The encoded file contents.
    """
    buf = io.StringIO()
    w = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    w.writerow(EXPORT_HEADERS)
    for r in records:
        w.writerow(_csv_row(r))
    text = buf.getvalue()
    if text.endswith("\n"):
        text = text[:-1]
    return text.encode("utf-8")

# ---- DOCX ----

# Characters lxml refuses to put in XML text nodes
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

def _xml_safe(s: str) -> str:
    return _XML_ILLEGAL.sub("", s)

def column_widths(total: int = DOCX_TABLE_WIDTH_TWIPS, percents: Sequence[int] = DOCX_COLUMN_PERCENTS) -> List[int]:
    """Column widths in twips, floored like the percentages they come from."""
    return [(p * total) // 100 for p in percents]

def _insert_tbl_pr(tbl_pr, element) -> None:
    """Inserts `element` into w:tblPr ahead of the children that must follow it."""
    for tag in ("w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook"):
        successor = tbl_pr.find(qn(tag))
        if successor is not None:
            successor.addprevious(element)
            return
    tbl_pr.append(element)

def _set_table_width(table, twips: int) -> None:
    tbl_pr = table._tbl.tblPr
    tbl_w = tbl_pr.find(qn("w:tblW"))
    if tbl_w is None:
        tbl_w = OxmlElement("w:tblW")
        _insert_tbl_pr(tbl_pr, tbl_w)
    tbl_w.set(qn("w:type"), "dxa")
    tbl_w.set(qn("w:w"), str(twips))

def _set_table_borders(table, color: str = DOCX_BORDER_COLOR) -> None:
    """Single-line borders around the table and between all rows and columns."""
    borders = OxmlElement("w:tblBorders")
    for edge in ("top", "left", "bottom", "right", "insideH", "insideV"):
        el = OxmlElement(f"w:{edge}")
        el.set(qn("w:val"), "single")
        el.set(qn("w:sz"), "4")
        el.set(qn("w:space"), "0")
        el.set(qn("w:color"), color)
        borders.append(el)
    _insert_tbl_pr(table._tbl.tblPr, borders)

def _shade(cell, fill: str) -> None:
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    cell._tc.get_or_add_tcPr().append(shd)

def add_hyperlink(paragraph, url: str, text: str):
    """Appends a clickable external link (blue, underlined) to `paragraph`."""
    r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)
    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)
    run = OxmlElement("w:r")
    r_pr = OxmlElement("w:rPr")
    color = OxmlElement("w:color")
    color.set(qn("w:val"), "0563C1")
    r_pr.append(color)
    u = OxmlElement("w:u")
    u.set(qn("w:val"), "single")
    r_pr.append(u)
    run.append(r_pr)
    t = OxmlElement("w:t")
    t.text = text
    run.append(t)
    hyperlink.append(run)
    paragraph._p.append(hyperlink)
    return hyperlink

def encode_docx(records: Iterable[Record], title: str, link_caption: str = "View") -> bytes:
    """
    Builds a Word document: a Heading 1 with `title`, then one bordered
    table (Year, Author(s)/Contributors, Title, URL) with a bold, shaded
    header row and one row per record.

    The URL cell holds a hyperlink labelled `link_caption`, or the
    placeholder when the record has no link. An empty `records` still
    produces a valid, header-only document.

    Args:
        records (Iterable[Record]): Canonical records to tabulate.
        title (str): Heading text.
        link_caption (str): Visible text of every link cell.

    Returns:
        bytes: The .docx file contents.
    """
    widths = column_widths()
    doc = Document()
    doc.add_heading(_xml_safe(title), level=1)
    doc.add_paragraph("")

    table = doc.add_table(rows=1, cols=len(EXPORT_HEADERS))
    table.autofit = False
    _set_table_width(table, DOCX_TABLE_WIDTH_TWIPS)
    _set_table_borders(table)
    for col, w in zip(table.columns, widths):
        col.width = Twips(w)

    for cell, header, w in zip(table.rows[0].cells, EXPORT_HEADERS, widths):
        cell.width = Twips(w)
        cell.paragraphs[0].add_run(header).bold = True
        _shade(cell, DOCX_HEADER_FILL)

    for r in records:
        cells = table.add_row().cells
        for cell, value, w in zip(cells, (r.year_text, r.authors, r.title), widths):
            cell.width = Twips(w)
            cell.text = _xml_safe(value)
        link_cell = cells[3]
        link_cell.width = Twips(widths[3])
        if r.url:
            add_hyperlink(link_cell.paragraphs[0], _xml_safe(r.url), _xml_safe(link_caption))
        else:
            link_cell.text = PLACEHOLDER

    out = io.BytesIO()
    doc.save(out)
    return out.getvalue()
