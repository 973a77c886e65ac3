# mini_fem - Generalized Finite-Element Assembly and Solve
"""
MINI-FEM: One Pipeline, Six Element Families
============================================

This package provides:
- Linear static analysis for bar, beam, truss, CST, quad and hex meshes
- Read-only access to every stage (element matrices, K, F, u, strain, stress)
- Text / JSON / pandas export of a solved state
- Background runs with latest-wins publication

ARCHITECTURE:
-------------
    kernel/         Family-agnostic core (DOF mapping, assembly, BCs, solve)
    continuum/      CST, Quad4, Hex8 with constitutive matrices and quadrature
    elements.py     Bar, truss and beam element formulations
    families.py     Family registry by tag
    mesh.py         Structured mesh generators
    config.py       AnalysisConfig and per-family presets
    analysis.py     build_analysis() -> AnalysisResult
    post.py         Strain/stress recovery, reactions
    export.py       Text, JSON and DataFrame export
    runner.py       AnalysisRunner (background runs)
"""

from .analysis import AnalysisResult, build_analysis
from .config import AnalysisConfig, NodalLoad, Support, load_config
from .errors import (
    ConfigurationError,
    DegenerateGeometryError,
    FEMError,
    OutOfRangeError,
    SingularSystemError,
)
from .export import export_json, export_text, to_frames
from .families import FAMILIES, get_family
from .kernel import DOFManager, solve_linear
from .runner import AnalysisRunner

__version__ = "0.1.0"
