"""Core base classes, registry and configuration for all model implementations."""
