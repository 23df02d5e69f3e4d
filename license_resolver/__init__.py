"""License text resolution for software dependencies."""

__version__ = "0.1.0"
