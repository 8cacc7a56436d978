"""Geometry and math helpers. No engine imports."""
