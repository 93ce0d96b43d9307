"""Harvest labelled values and identifiers from offer workbooks."""

__version__ = "0.3.0"

__all__ = ["__version__"]
