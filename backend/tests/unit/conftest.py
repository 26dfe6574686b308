"""Unit test configuration.

Unit tests should not depend on app.py or external services; the
in-memory fixtures from the root conftest are all they need.
"""
