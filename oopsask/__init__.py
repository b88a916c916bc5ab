"""Translation cache backend for the Oops & Ask app."""

__version__ = "0.1.0"
