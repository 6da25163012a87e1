"""gitpr - manage GitHub pull requests from a local git checkout."""

__version__ = "0.1.0"
