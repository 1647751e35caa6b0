# --- src/fwsim_core/constants.py ---
import logging
import math

logger = logging.getLogger(__name__)

# --- Physical Constants (SI) ---

#: Vacuum permittivity in F/m.
EPSILON0: float = 8.8541878176e-12

#: Vacuum permeability in H/m (4*pi*1e-7).
MU0: float = 4.0e-7 * math.pi

#: Speed of light in vacuum, m/s.
SPEED_OF_LIGHT: float = 1.0 / math.sqrt(EPSILON0 * MU0)

# --- Numerical Constants for Simulation ---

#: Default oscillation frequency of the plane-wave boundary drive.
#: Value: 750 MHz.
DEFAULT_DRIVE_FREQUENCY_HZ: float = 750.0e6

#: Rows of a sparse matrix whose l1-norm falls below this threshold are treated
#: as structurally empty by `SparseMatrix.eliminate_zero_rows`.
ZERO_ROW_THRESHOLD: float = 1.0e-12

#: Default iteration budget for a single run.
DEFAULT_MAX_STEPS: int = 100

logger.debug("Defined core constants: EPSILON0, MU0, SPEED_OF_LIGHT, DEFAULT_DRIVE_FREQUENCY_HZ, ZERO_ROW_THRESHOLD")
