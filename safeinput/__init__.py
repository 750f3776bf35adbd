"""safeinput - input sanitization and HTML-safety validation."""

__version__ = "0.1.0"
