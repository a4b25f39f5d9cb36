"""Clinic bookkeeping dashboard on the civil (Jalali) calendar."""
