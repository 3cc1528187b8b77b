"""Ledger CSV import domain service."""

import csv
import logging
from pathlib import Path
from typing import Any, Optional

from arrecon.database.base import Database
from arrecon.domain.errors import NotFoundError, ValidationError
from arrecon.domain.ledger import LedgerService
from arrecon.utils.amount_parser import parse_optional_amount
from arrecon.utils.date_parser import parse_ledger_date

logger = logging.getLogger(__name__)

# Ledger sheet header -> ledger field
COLUMN_FIELDS = {
    "date": "date",
    "due date": "due_date",
    "number": "document_number",
    "customer name": "customer_name",
    "sales rep": "sales_rep",
    "debit": "debit",
    "credit": "credit",
    "matching": "matching_key",
}

REQUIRED_COLUMNS = {"customer name"}


class LedgerImportService:
    """Service for loading a ledger sheet export into the ledger store."""

    def __init__(self, db: Database):
        """Initialize ledger import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.ledger_service = LedgerService(db)

    def import_csv(self, csv_file_path: str, replace: bool = False) -> dict[str, Any]:
        """Import ledger rows from a CSV file.

        Headers are matched case-insensitively. Unparsable dates are kept as
        missing; blank amounts count as zero.

        Args:
            csv_file_path: Path to CSV file
            replace: Delete existing ledger rows before importing

        Returns:
            Dict with import statistics:
            - imported: number of rows imported
            - errors: list of error messages for skipped rows

        Raises:
            NotFoundError: If the CSV file doesn't exist
            ValidationError: If the file has no header or no customer column
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise NotFoundError(f"CSV file not found: {csv_file_path}")

        imported = 0
        errors: list[str] = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(4096)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise ValidationError("CSV file has no columns")

            column_map = self.map_columns(reader.fieldnames)
            missing = REQUIRED_COLUMNS - {c.strip().lower() for c in reader.fieldnames}
            if missing:
                raise ValidationError(
                    f"CSV file missing required columns: {', '.join(sorted(missing))}"
                )

            if replace:
                deleted = self.ledger_service.clear()
                logger.info("Cleared %d existing ledger rows", deleted)

            for row_num, row in enumerate(reader, start=2):  # header is row 1
                values = {
                    field: self.cell(row, column) for column, field in column_map.items()
                }

                customer_name = values.get("customer_name")
                if not customer_name:
                    errors.append(f"Row {row_num}: Missing customer name")
                    continue

                try:
                    debit = parse_optional_amount(values.get("debit"))
                    credit = parse_optional_amount(values.get("credit"))
                    self.ledger_service.add_entry(
                        customer_name=customer_name,
                        document_number=values.get("document_number") or "",
                        date=parse_ledger_date(values.get("date")),
                        due_date=parse_ledger_date(values.get("due_date")),
                        sales_rep=values.get("sales_rep"),
                        debit=debit,
                        credit=credit,
                        matching_key=values.get("matching_key"),
                    )
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")
                    continue

                imported += 1

        logger.info("Imported %d ledger rows from %s (%d errors)", imported, csv_path, len(errors))
        return {
            "imported": imported,
            "errors": errors,
        }

    def map_columns(self, fieldnames: list[str]) -> dict[str, str]:
        """Map the file's own header names to ledger fields."""
        column_map: dict[str, str] = {}
        for name in fieldnames:
            if name is None:
                continue
            field = COLUMN_FIELDS.get(name.strip().lower())
            if field is not None:
                column_map[name] = field
        return column_map

    def cell(self, row: dict[str, Optional[str]], column: str) -> Optional[str]:
        value = row.get(column)
        if value is None:
            return None
        value = value.strip()
        return value or None
