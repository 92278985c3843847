"""CaseKit Citations - UK case-law citation resolution service."""

__version__ = "0.1.0"
