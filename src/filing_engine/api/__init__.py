"""HTTP API for the filing engine."""
