"""ALL IS WELL mental-wellness web application."""

__version__ = "0.1.0"
