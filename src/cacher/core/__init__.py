"""Cache store, its entries, errors, logging and metrics."""
