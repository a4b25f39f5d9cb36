"""Bank statement reading for reconciliation."""

import csv
import logging
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Sequence

from clinicbooks.domain.calendar import normalize_civil
from clinicbooks.domain.entities import (
    ColumnMapping,
    StatementDirection,
    StatementLine,
    StatementMode,
)
from clinicbooks.domain.errors import ValidationError
from clinicbooks.utils.amount_parser import parse_amount

logger = logging.getLogger(__name__)

DELIMITERS = ",;\t|"

# Header words recognised per field, English and Persian
HEADER_HINTS = {
    "date": ("date", "تاریخ"),
    "description": ("description", "شرح"),
    "amount": ("amount", "مبلغ"),
    "debit": ("debit", "بدهکار"),
    "credit": ("credit", "بستانکار"),
}


def _find_header(headers: Sequence[str], hints: Sequence[str]) -> Optional[str]:
    for header in headers:
        lowered = header.lower()
        if any(hint in lowered for hint in hints):
            return header
    return None


def detect_columns(headers: Sequence[str]) -> ColumnMapping:
    """Guess which headers hold each statement field.

    The first header containing a known word wins. Two-column mode is
    chosen when both a debit and a credit column are found.

    Args:
        headers: Header row of the statement

    Returns:
        ColumnMapping with the detected headers and mode
    """
    found = {field: _find_header(headers, hints) for field, hints in HEADER_HINTS.items()}
    mode = (
        StatementMode.DOUBLE
        if found["debit"] and found["credit"]
        else StatementMode.SINGLE
    )
    return ColumnMapping(mode=mode, **found)


def missing_columns(mapping: ColumnMapping) -> list[str]:
    """Names of the fields the mapping still needs for its mode."""
    required = ["date", "description"]
    if mapping.mode == StatementMode.SINGLE:
        required.append("amount")
    else:
        required.extend(["debit", "credit"])
    return [name for name in required if not getattr(mapping, name)]


def single_column_line(
    row_number: int, date: str, description: str, amount: Decimal
) -> StatementLine:
    """Line from a signed amount: zero or more is a credit, negative a debit."""
    direction = StatementDirection.CREDIT if amount >= 0 else StatementDirection.DEBIT
    return StatementLine(
        row_number=row_number,
        date=date,
        description=description,
        amount=abs(amount),
        direction=direction,
        ambiguous=amount == 0,
    )


def two_column_line(
    row_number: int, date: str, description: str, debit: Decimal, credit: Decimal
) -> StatementLine:
    """Line from debit and credit columns.

    The larger column gives the amount. Credit wins only when strictly
    larger, so equal columns read as a debit.
    """
    amount = max(debit, credit)
    direction = StatementDirection.CREDIT if credit > debit else StatementDirection.DEBIT
    return StatementLine(
        row_number=row_number,
        date=date,
        description=description,
        amount=abs(amount),
        direction=direction,
        ambiguous=amount == 0,
    )


def _column_amount(value: Optional[str]) -> Decimal:
    # Blank debit/credit cells read as zero
    if value is None or not value.strip():
        return Decimal("0")
    return parse_amount(value)


def read_statement(
    csv_file_path: str,
    mapping: Optional[ColumnMapping] = None,
    mode: Optional[StatementMode] = None,
    overrides: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    """Read a bank statement CSV file into statement lines.

    Args:
        csv_file_path: Path to CSV file
        mapping: Column mapping; detected from the header row when omitted
        mode: Overrides the mapping's amount mode
        overrides: Header names replacing detected ones, keyed by field
            (date, description, amount, debit, credit)

    Returns:
        Dict with:
        - lines: list of StatementLine
        - errors: list of row error messages
        - mapping: the ColumnMapping used

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValidationError: If the file has no header or required columns are missing
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    lines: list[StatementLine] = []
    errors: list[str] = []

    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        sample = f.read(1024)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=DELIMITERS).delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.DictReader(f, delimiter=delimiter)
        headers = reader.fieldnames
        if not headers:
            raise ValidationError("CSV file has no columns")
        headers = [header.strip() for header in headers]
        reader.fieldnames = headers

        if mapping is None:
            mapping = detect_columns(headers)
        if overrides:
            mapping = replace(mapping, **overrides)
            if mode is None:
                both = mapping.debit and mapping.credit
                mode = StatementMode.DOUBLE if both else StatementMode.SINGLE
        if mode is not None:
            mapping = replace(mapping, mode=StatementMode(mode))

        missing = missing_columns(mapping)
        if missing:
            raise ValidationError(f"Could not find columns for: {', '.join(missing)}")
        mapped = (mapping.date, mapping.description, mapping.amount, mapping.debit, mapping.credit)
        unknown = [column for column in mapped if column and column not in headers]
        if unknown:
            raise ValidationError(f"CSV file missing columns: {', '.join(unknown)}")

        for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
            date_text = (row.get(mapping.date) or "").strip()
            description = (row.get(mapping.description) or "").strip()
            try:
                if mapping.mode == StatementMode.SINGLE:
                    line = single_column_line(
                        row_num, normalize_civil(date_text), description,
                        parse_amount(row.get(mapping.amount) or ""),
                    )
                else:
                    line = two_column_line(
                        row_num, normalize_civil(date_text), description,
                        _column_amount(row.get(mapping.debit)),
                        _column_amount(row.get(mapping.credit)),
                    )
            except ValueError as e:
                errors.append(f"Row {row_num}: {e}")
                continue
            if line.ambiguous:
                logger.warning("Statement row %s has a zero amount", row_num)
            lines.append(line)

    return {"lines": lines, "errors": errors, "mapping": mapping}
