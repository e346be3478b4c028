"""Remote-read storage test double."""

__version__ = "0.1.0"
