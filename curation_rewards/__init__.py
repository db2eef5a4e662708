"""Curation reward distribution for Hive delegators."""

__version__ = "0.1.0"
