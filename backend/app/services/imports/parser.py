from __future__ import annotations

import datetime as dt
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import openpyxl
import pandas as pd

from app.core.config import settings


class FileRejected(ValueError):
    """Upload cannot be parsed at all (wrong type, too big, empty, corrupted)."""


@dataclass
class ImportError:
    row: int
    message: str
    column: str | None = None
    value: Any = None


@dataclass
class ParseResult:
    headers: list[str]
    rows: list[dict[str, Any]]
    errors: list[ImportError] = field(default_factory=list)


ALLOWED_EXTENSIONS = {".csv": "csv", ".xlsx": "xlsx"}
EXCEL_TIME_EPOCHS = {dt.date(1899, 12, 30), dt.date(1899, 12, 31)}


def detect_source_type(file_name: str) -> str:
    ext = Path(file_name or "").suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise FileRejected("Only .csv and .xlsx files are supported")
    return ALLOWED_EXTENSIONS[ext]


def check_size(content: bytes) -> None:
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise FileRejected(f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes")
    if not content:
        raise FileRejected("File is empty")


def _clean(v: Any) -> Any:
    if v is None:
        return None
    if isinstance(v, float) and v != v:
        return None
    if isinstance(v, str):
        s = v.strip()
        return s if s else None
    if isinstance(v, dt.datetime):
        # time-only cells can come back anchored on Excel's day zero
        if v.date() in EXCEL_TIME_EPOCHS:
            return v.strftime("%H:%M")
        return v.date().isoformat() if v.time() == dt.time(0) else v.isoformat()
    if isinstance(v, dt.time):
        return v.strftime("%H:%M")
    if isinstance(v, dt.date):
        return v.isoformat()
    return v


def parse_csv(content: bytes) -> ParseResult:
    try:
        df = pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise FileRejected(f"Failed to parse CSV: {e}") from e

    headers = [str(c).strip() for c in df.columns]
    rows: list[dict[str, Any]] = []
    errors: list[ImportError] = []
    for record in df.itertuples(index=False, name=None):
        row = {h: _clean(v) for h, v in zip(headers, record)}
        if all(v is None for v in row.values()):
            continue
        rows.append(row)
    if not headers:
        errors.append(ImportError(row=0, message="Headers not properly detected"))
    return ParseResult(headers=headers, rows=rows, errors=errors)


def parse_xlsx(content: bytes) -> ParseResult:
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), data_only=True)
    except Exception as e:  # openpyxl raises a mix of zipfile/KeyError/InvalidFileException
        raise FileRejected("Excel file is empty or corrupted") from e
    if not wb.sheetnames:
        raise FileRejected("No sheets found in Excel file")

    ws = wb[wb.sheetnames[0]]
    it = ws.iter_rows(values_only=True)
    header_row = next(it, None)
    if header_row is None:
        raise FileRejected("Excel file must contain at least a header row")

    headers: list[str] = []
    errors: list[ImportError] = []
    for i, h in enumerate(header_row, start=1):
        name = _clean(h)
        if name is None:
            name = f"Column{i}"
            errors.append(ImportError(row=1, column=name, message="Empty header; generated a column name"))
        headers.append(str(name))

    rows: list[dict[str, Any]] = []
    for values in it:
        row = {h: _clean(v) for h, v in zip(headers, values)}
        if all(v is None for v in row.values()):
            continue
        rows.append(row)
    wb.close()
    return ParseResult(headers=headers, rows=rows, errors=errors)


def parse_upload(file_name: str, content: bytes) -> tuple[str, ParseResult]:
    source_type = detect_source_type(file_name)
    check_size(content)
    if source_type == "csv":
        return source_type, parse_csv(content)
    return source_type, parse_xlsx(content)
