"""Simplex document models."""
