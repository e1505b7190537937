"""Keyboard geometry: key classification, width solvers and layout assembly."""

from .errors import KeyboardError, ConfigurationError, SolverInvariantError
from .keys import KeyClass, KeySpec, is_white, is_black, key_class, note_name
from .specification import KeyboardSpecification, MAX_WIDTH
from .width_solver import WidthSolver, WidthSolution, WidthUnit, UnitKind, Tier
from .sub_width_solver import SubWidthSolver, SubWidthSolution, SubWidthBreakdown
from .layout import LayoutAssembler, KeyboardLayout, Rectangle, WhiteKey, BlackKey
from .builder import KeyboardBuilder, STANDARD_PIANOS, compute_layout

__all__ = [
    "KeyboardError",
    "ConfigurationError",
    "SolverInvariantError",
    "KeyClass",
    "KeySpec",
    "is_white",
    "is_black",
    "key_class",
    "note_name",
    "KeyboardSpecification",
    "MAX_WIDTH",
    "WidthSolver",
    "WidthSolution",
    "WidthUnit",
    "UnitKind",
    "Tier",
    "SubWidthSolver",
    "SubWidthSolution",
    "SubWidthBreakdown",
    "LayoutAssembler",
    "KeyboardLayout",
    "Rectangle",
    "WhiteKey",
    "BlackKey",
    "KeyboardBuilder",
    "STANDARD_PIANOS",
    "compute_layout",
]
