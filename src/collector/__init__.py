"""Project Collector: form state and submission engine for project contributions."""

__version__ = "0.1.0"
