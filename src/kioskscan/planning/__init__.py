"""Bulk reconciliation planning."""
