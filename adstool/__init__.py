"""List, extract, add and remove NTFS Alternate Data Streams."""

__version__ = "1.0.0"
