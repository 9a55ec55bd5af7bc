"""Request parsing and response helpers for API Gateway Lambda handlers."""

__version__ = "0.1.0"
