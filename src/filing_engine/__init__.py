"""Filing obligation reconciliation and staff compensation engine."""

__version__ = "1.0.0"
