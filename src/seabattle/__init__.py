"""Rules engine for two-player Sea Battle."""

__version__ = "0.1.0"
