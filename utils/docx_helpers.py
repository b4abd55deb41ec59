from typing import Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt


def add_table(doc: Document, headers: Sequence[str], rows: Sequence[Sequence[str]], numeric_cols=()) -> None:
    """
    Append a bordered table with a bold header row. Columns listed in
    `numeric_cols` (0-based) are right aligned.
    """
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"

    for idx, title in enumerate(headers):
        cell = table.rows[0].cells[idx]
        cell.text = ""
        run = cell.paragraphs[0].add_run(str(title))
        run.bold = True

    for values in rows:
        cells = table.add_row().cells
        for idx, value in enumerate(values):
            cells[idx].text = str(value)
            if idx in numeric_cols:
                cells[idx].paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.RIGHT


def add_summary_line(doc: Document, label: str, value: str) -> None:
    p = doc.add_paragraph()
    p.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    p.add_run(f"{label} ")
    bold = p.add_run(value)
    bold.bold = True


def set_base_font(doc: Document, size: int = 9) -> None:
    style = doc.styles["Normal"]
    style.font.name = "Arial"
    style.font.size = Pt(size)
