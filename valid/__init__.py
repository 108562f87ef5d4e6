"""Composable validation of values, with one error type for every broken rule."""

__version__ = "0.3.1"

__all__ = ["constraints", "properties", "validation", "values"]