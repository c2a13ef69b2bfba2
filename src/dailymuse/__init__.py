"""dailymuse: a single-author daily comic publishing tool."""

__version__ = "0.1.0"
