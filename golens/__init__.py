"""Reading and writing the records of Go compiler object files."""

__version__ = "0.1.0"