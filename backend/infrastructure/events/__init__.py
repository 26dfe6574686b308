"""Event bus implementations."""
