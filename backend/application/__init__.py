"""Application layer: use-case services and event handlers."""
