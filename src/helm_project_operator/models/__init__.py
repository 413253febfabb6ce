"""Pydantic models for all CRDs."""

# Import all models to ensure they're registered
from . import projecthelmchart
from . import helmlocker
from . import helmcontroller

__all__ = ["projecthelmchart", "helmlocker", "helmcontroller"]
