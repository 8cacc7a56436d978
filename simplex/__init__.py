"""Simplex — corrective blendshape solver."""

from simplex.engine import Shape, Simplex, SolverConfig
from simplex.schema.parser import SchemaError

__all__ = ["Shape", "Simplex", "SolverConfig", "SchemaError"]
