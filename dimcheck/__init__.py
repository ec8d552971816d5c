"""dimcheck - product image dimension QC against a reference spreadsheet."""

__version__ = "0.1.0"
