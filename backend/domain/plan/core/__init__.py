"""Core model of the plan domain."""
