"""Health monitor for a fleet of local CKB light clients."""

__version__ = "0.1.0"
