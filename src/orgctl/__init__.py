"""orgctl — organization hierarchy management on a closure table."""

__version__ = "0.1.0"
