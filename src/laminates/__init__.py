"""Top-level package for laminates.

Classical lamination theory analysis of fiber-reinforced composite laminates:
stiffness matrices, ply stresses, failure criteria, progressive failure and
secondary (thermal, buckling, interlaminar) analyses.
"""


# Public API re-exports
# Set global numpy print options for nicer matrix printing across the project
# These options apply whenever numpy arrays are printed (e.g., in tests/logs).
import numpy as np

from .analysis.buckling import BucklingDimensions, BucklingResult, compute_buckling
from .analysis.interlaminar import assess_delamination_risk, compute_interlaminar_stress
from .analysis.thermal import (
    compute_thermal_mismatch_stress,
    compute_thermal_strains,
    compute_thermal_stress,
)
from .clt.data_utils import (
    ABDMatrix,
    ElasticProperties,
    GeometryConfig,
    GeometryType,
    Loads,
    MaterialProperties,
    Ply,
    StrengthProperties,
    ThermalProperties,
    material_registry,
)
from .clt.laminate import compute_abd, compute_equivalent_properties, compute_stress_strain
from .errors import ConfigurationError, LaminateError, MissingMaterialError, SingularMatrixError
from .failure.criteria import FailureCriterion, evaluate_failure, safety_summary
from .failure.progressive import run_progressive_failure

np.set_printoptions(precision=3, suppress=True, linewidth=120)

__all__ = [
    "ABDMatrix",
    "BucklingDimensions",
    "BucklingResult",
    "ConfigurationError",
    "ElasticProperties",
    "FailureCriterion",
    "GeometryConfig",
    "GeometryType",
    "LaminateError",
    "Loads",
    "MaterialProperties",
    "MissingMaterialError",
    "Ply",
    "SingularMatrixError",
    "StrengthProperties",
    "ThermalProperties",
    "assess_delamination_risk",
    "compute_abd",
    "compute_buckling",
    "compute_equivalent_properties",
    "compute_interlaminar_stress",
    "compute_stress_strain",
    "compute_thermal_mismatch_stress",
    "compute_thermal_strains",
    "compute_thermal_stress",
    "evaluate_failure",
    "material_registry",
    "run_progressive_failure",
    "safety_summary",
]
