"""Cloud-agnostic infrastructure resource model with reference resolution and validation."""

__version__ = "0.1.0"