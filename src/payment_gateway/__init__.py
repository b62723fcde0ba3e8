"""Payment Gateway: idempotent card payment authorization."""

__version__ = "0.1.0"
