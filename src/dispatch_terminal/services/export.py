# src/dispatch_terminal/services/export.py
"""Spreadsheet, CSV and Word renderings of report rows."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from enum import Enum
from typing import Any
from urllib.parse import quote

import pandas as pd
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH

SHEET_NAME = "Relatorio"

HISTORY_TITLE = "HISTÓRICO DE ARQUIVOS"
HISTORY_DOC_HEADER = ["DATA", "NOME", "FROTA", "MATR.", "ZONA", "DT", "VOL."]

PRODUCTIVITY_TITLE = "MÉTRICAS DE PRODUTIVIDADE"
PRODUCTIVITY_DOC_HEADER = ["DATA", "HORA", "ZONA", "FREQ. ZONA", "VOL."]


class ExportFormat(str, Enum):
    XLSX = "xlsx"
    CSV = "csv"
    DOCX = "docx"

    @property
    def media_type(self) -> str:
        return {
            ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            ExportFormat.CSV: "text/csv; charset=utf-8",
            ExportFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        }[self]


def to_xlsx(rows: Sequence[dict[str, Any]], columns: Sequence[str]) -> bytes:
    """Render rows as a single-sheet workbook."""
    frame = pd.DataFrame(list(rows), columns=list(columns))
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    return buffer.getvalue()


def to_csv(rows: Sequence[dict[str, Any]], columns: Sequence[str]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(columns), extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def to_docx(
    title: str,
    header: Sequence[str],
    rows: Sequence[Sequence[Any]],
    subtitle: str | None = None,
) -> bytes:
    """Render a titled table as a Word document."""
    document = Document()
    heading = document.add_heading(title, level=1)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
    if subtitle:
        paragraph = document.add_paragraph(subtitle)
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER

    table = document.add_table(rows=1, cols=len(header))
    table.style = "Table Grid"
    for cell, label in zip(table.rows[0].cells, header, strict=True):
        cell.text = label
        for run in cell.paragraphs[0].runs:
            run.bold = True
    for row in rows:
        cells = table.add_row().cells
        for cell, value in zip(cells, row, strict=True):
            cell.text = "" if value is None else str(value)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def history_document_rows(rows: Sequence[dict[str, Any]]) -> list[list[Any]]:
    """Project history export rows onto the Word table's columns."""
    return [
        [row["Data"], row["Nome"], row["Frota"], row["Matrícula"], row["Zona"], row["DT"], row["Volume"]]
        for row in rows
    ]


def productivity_document_rows(rows: Sequence[dict[str, Any]]) -> list[list[Any]]:
    return [
        [row["Data"], row["Hora"], row["Zona"], row["Frequência na Zona"], row["Volume"]]
        for row in rows
    ]


def render(
    fmt: ExportFormat,
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    *,
    title: str,
    doc_header: Sequence[str],
    doc_rows: Sequence[Sequence[Any]],
    subtitle: str | None = None,
) -> bytes:
    if fmt is ExportFormat.XLSX:
        return to_xlsx(rows, columns)
    if fmt is ExportFormat.CSV:
        return to_csv(rows, columns)
    return to_docx(title, doc_header, doc_rows, subtitle=subtitle)


def safe_filename_part(value: str) -> str:
    """Collapse whitespace and path separators so a name fits in a filename."""
    cleaned = "".join("_" if ch in '/\\:*?"<>|' else ch for ch in value.strip())
    return "_".join(cleaned.split()) or "export"


def content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII filenames."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii") or "export"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
