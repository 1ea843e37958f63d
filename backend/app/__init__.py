"""FastAPI application package for the panel ledger."""
