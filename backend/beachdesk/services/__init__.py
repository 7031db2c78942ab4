"""Domain services for the booking and billing ledger."""
