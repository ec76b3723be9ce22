"""HR analytics backend with resilient database access."""

__version__ = "1.0.0"
