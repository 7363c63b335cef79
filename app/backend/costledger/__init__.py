"""Construction cost ledger backend."""
