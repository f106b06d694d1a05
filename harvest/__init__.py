"""Harvest metadata from PDS4 label files into registry documents."""

__version__ = "0.1.0"
