"""Identity and access control for the content site back office."""

__version__ = "0.1.0"
