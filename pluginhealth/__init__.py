"""Plugin health scoring: probe plugins and compute weighted health scores."""

__version__ = "0.1.0"
