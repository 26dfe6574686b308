"""Event handlers for the plan domain."""

from .biometrics_updated_handler import BiometricsUpdatedHandler

__all__ = ["BiometricsUpdatedHandler"]
