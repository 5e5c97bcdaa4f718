"""Pick Assistant - champion select recommendations from sampled ranked data."""

__version__ = "0.1.0"
