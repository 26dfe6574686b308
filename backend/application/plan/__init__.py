"""Plan use cases."""
