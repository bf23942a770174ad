"""Cloud Foundry test environment cleaner."""

__version__ = "0.1.0"
