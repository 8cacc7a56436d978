"""Simplex document parsing."""
