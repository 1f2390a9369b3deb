# spaceframe - Linear-elastic 3D frame analysis
"""
SPACEFRAME: Linear Static Analysis of 3D Frames
===============================================

Direct stiffness method for space frames made of two-node Euler-Bernoulli
members with 6 DOFs per node.

ARCHITECTURE:
-------------
    kernel/         Matrix type, transformation, DOF bookkeeping, assembly, solve
    model.py        Immutable model definitions (nodes, members, supports, loads)
    io.py           JSON model files (pydantic schema)
    validate.py     Path-tagged model checks
    loads.py        Fixed-end reactions of member loads
    elements.py     3D frame element (stiffness, transformation, force recovery)
    analyzer.py     Per-combination solve
    results.py      Result containers and pandas export
    cli.py          Command-line entry point

Typical use::

    from spaceframe import Analyzer, load_model

    result = Analyzer(load_model("frame.json")).analyze("COMB1")
    print(result.summary.max_displacement)
"""

from .analyzer import Analyzer
from .config import CONFIG, AnalysisConfig
from .errors import (
    DimensionError,
    MechanismError,
    ModelLoadError,
    ModelValidationError,
    SingularMatrixError,
    SpaceframeError,
    ZeroLengthError,
)
from .io import default_model, dump_model, load_model, model_from_dict, parse_model
from .model import (
    Direction,
    LoadCase,
    LoadCombination,
    Material,
    Member,
    MemberLoad,
    MemberLoadType,
    Model,
    ModelInfo,
    Node,
    NodeLoad,
    Section,
    Support,
)
from .results import AnalysisResult
from .validate import validate_model

__version__ = "0.1.0"
