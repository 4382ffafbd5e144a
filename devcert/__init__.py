"""devcert — local development TLS trust chain bootstrapper."""

__version__ = "0.1.0"
