"""Extract translation keys from JS/TS sources and keep JSON translation files in sync."""

__version__ = "0.1.0"
