"""Utility functions for clinicbooks."""

from clinicbooks.utils.date_parser import parse_date
from clinicbooks.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
