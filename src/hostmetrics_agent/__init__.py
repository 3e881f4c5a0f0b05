"""Hostmetrics agent - ships host health metrics to a plaintext TCP collector."""

__version__ = "0.1.0"
