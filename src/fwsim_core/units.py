# --- src/fwsim_core/units.py ---
import pint
import logging

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.info("Pint Unit Registry initialized.")

# --- Canonical dimensionality objects for explicit checks ---
# These store the frozendict representation of the dimensions.
TIME_DIMENSIONALITY = ureg.parse_expression('second').dimensionality
FREQUENCY_DIMENSIONALITY = ureg.parse_expression('hertz').dimensionality
LENGTH_DIMENSIONALITY = ureg.parse_expression('meter').dimensionality

logger.debug("Defined canonical dimensionalities: TIME_DIMENSIONALITY, FREQUENCY_DIMENSIONALITY, LENGTH_DIMENSIONALITY")

__all__ = ["ureg", "Quantity", "TIME_DIMENSIONALITY", "FREQUENCY_DIMENSIONALITY", "LENGTH_DIMENSIONALITY"]
