"""Simplex solver engine: progressions, controllers, TriSpaces and the orchestrator."""

from simplex.engine.config import SolverConfig
from simplex.engine.context import SolveContext, normalize_inputs
from simplex.engine.controllers import Combo, Controller, ControllerRef, Floater, Slider, Stage, Traversal
from simplex.engine.progression import Interp, Progression
from simplex.engine.shapes import Shape
from simplex.engine.solver import Simplex
from simplex.engine.trispace import TriSpace

__all__ = [
    "SolverConfig",
    "SolveContext",
    "normalize_inputs",
    "Combo",
    "Controller",
    "ControllerRef",
    "Floater",
    "Slider",
    "Stage",
    "Traversal",
    "Interp",
    "Progression",
    "Shape",
    "Simplex",
    "TriSpace",
]
