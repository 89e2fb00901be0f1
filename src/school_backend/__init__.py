"""Cache-backed data-access backend for school management."""
