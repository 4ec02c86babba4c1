"""Multi-level parking lot: slot allocation, level registry and service facade."""

__version__ = "1.0.0"
