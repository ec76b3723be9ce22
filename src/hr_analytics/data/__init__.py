"""Sample data sets used as query fallbacks."""
