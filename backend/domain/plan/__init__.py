"""Plan domain: target calculation and plan snapshots."""
