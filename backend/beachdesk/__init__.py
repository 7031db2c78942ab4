"""Booking and billing ledger for a seasonal beach resort."""
