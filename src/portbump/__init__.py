"""Bump PORTREVISION in ports tree Makefiles."""

__version__ = "0.1.0"
