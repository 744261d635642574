"""Incremental daily weather history harvester for an Excel dataset."""

__version__ = "0.1.0"
