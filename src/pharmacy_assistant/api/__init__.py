"""HTTP API for the pharmacy sales assistant."""
