"""Park knowledge service: retrieval-grounded answers about US national parks."""

__version__ = "1.0.0"
