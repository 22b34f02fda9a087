"""In-memory real-estate marketplace domain model."""

__version__ = "0.1.0"
