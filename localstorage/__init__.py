"""Data types and helpers for describing local persistent volumes on cluster nodes."""

__version__ = "0.1.0"