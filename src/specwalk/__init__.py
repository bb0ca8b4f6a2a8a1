from .errors import (
    SpectrahedronError,
    DimensionMismatch,
    Infeasible,
    UnboundedDirection,
    ReflectionBudgetExceeded,
)
from .lmi import LMI
from .oracle import (
    DEFAULT_TOL,
    DEFAULT_EPSILON,
    BilliardOracleSettings,
    BoltzmannOracleSettings,
    pencil_roots,
    first_exit,
    first_exit_curved,
    reflect,
)
from .ellipsoid import Ellipsoid, mbe_of_points
from .spectrahedron import Spectrahedron
from .transform import AffineMap
from .walk import (
    WalkState,
    WalkResult,
    billiard_trajectory,
    billiard_walk,
    boltzmann_trajectory,
    boltzmann_walk,
    hit_and_run_boltzmann_walk,
)
from .preprocess import (
    PreprocessResult,
    certified_radius,
    inner_ball,
    round_spectrahedron,
    prepare,
)
from .sampling import SamplingResult, sample_points
from .sdpa import format_sdpa, write_sdpa
from .random import *
from .util import *
