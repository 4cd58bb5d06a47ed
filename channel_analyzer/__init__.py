"""Channel Analyzer - YouTube channel content analysis and idea generation."""

__version__ = "0.1.0"
