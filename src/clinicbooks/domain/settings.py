"""Alert settings domain service."""

from dataclasses import replace
from typing import Optional

from clinicbooks.database.base import Database
from clinicbooks.domain.entities import AlertSettings
from clinicbooks.domain.errors import ValidationError, non_positive


class SettingsService:
    """Service for reading and changing alert settings."""

    def __init__(self, db: Database):
        self.db = db

    def get_alert_settings(self) -> AlertSettings:
        return self.db.get_alert_settings()

    def update_alert_settings(
        self,
        low_inventory: Optional[bool] = None,
        overdue_invoices: Optional[bool] = None,
        upcoming_dues: Optional[bool] = None,
        pending_payslips: Optional[bool] = None,
        overdue_invoice_days: Optional[int] = None,
        upcoming_due_days: Optional[int] = None,
    ) -> AlertSettings:
        """Change the given settings and keep the rest.

        Returns:
            The settings now stored

        Raises:
            ValidationError: If a day count is less than 1
        """
        changes = {
            name: value
            for name, value in (
                ("low_inventory", low_inventory),
                ("overdue_invoices", overdue_invoices),
                ("upcoming_dues", upcoming_dues),
                ("pending_payslips", pending_payslips),
                ("overdue_invoice_days", overdue_invoice_days),
                ("upcoming_due_days", upcoming_due_days),
            )
            if value is not None
        }
        if not changes:
            return self.db.get_alert_settings()
        for name in ("overdue_invoice_days", "upcoming_due_days"):
            if name in changes and changes[name] < 1:
                raise ValidationError(non_positive(name, changes[name]))

        settings = replace(self.db.get_alert_settings(), **changes)
        self.db.save_alert_settings(settings)
        return settings
