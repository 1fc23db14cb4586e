"""NodeVault - a terminal personal-record manager."""

__version__ = "1.0.0"
