"""User management API with Clerk identity sync and Prometheus metrics."""

__version__ = "0.1.0"
