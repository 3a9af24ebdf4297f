# Configuration parameters
"""
Runtime configuration for geoscaling.

Each entry of the defaults table holds ``[default, validator]``. Values are
validated on assignment, so a bad setting fails where it is made rather than
deep inside a scaling call.

>>> import geoscaling as gs
>>> gs.rcParams["geo.length"] = 660 * gs.units.km
>>> with gs.rc_context({"scaling.reapply": "ignore"}):
...     pass
"""

import copy
import logging
from contextlib import contextmanager

import pint

from .units import ureg

logger = logging.getLogger(__name__)


def validate_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a number, got {value!r}")
    return float(value)


def validate_positive(value):
    value = validate_number(value)
    if value <= 0.0:
        raise ValueError(f"Expected a positive number, got {value!r}")
    return value


def validate_quantity(dimension):
    """Accept bare numbers or quantities of the given dimension."""

    def validator(value):
        if isinstance(value, pint.Quantity):
            if not value.check(dimension):
                raise ValueError(f"Expected a {dimension} quantity, got {value}")
            return value
        return validate_number(value)

    return validator


def validate_choice(*choices):
    def validator(value):
        if value not in choices:
            raise ValueError(f"Expected one of {choices}, got {value!r}")
        return value

    return validator


_DEFAULTS = {

"geo.length": [ureg.Quantity(1000.0, "km"), validate_quantity("[length]")],
"geo.temperature": [ureg.Quantity(1000.0, "degC"), validate_quantity("[temperature]")],
"geo.stress": [ureg.Quantity(10.0, "MPa"), validate_quantity("[pressure]")],
"geo.viscosity": [ureg.Quantity(1e20, "Pa*s"), validate_quantity("[viscosity]")],

"si.length": [ureg.Quantity(1000.0, "m"), validate_quantity("[length]")],
"si.temperature": [ureg.Quantity(1000.0, "K"), validate_quantity("[temperature]")],
"si.stress": [ureg.Quantity(10.0, "Pa"), validate_quantity("[pressure]")],
"si.viscosity": [ureg.Quantity(1e20, "Pa*s"), validate_quantity("[viscosity]")],

"none.length": [1.0, validate_positive],
"none.temperature": [1.0, validate_positive],
"none.stress": [1.0, validate_positive],
"none.viscosity": [1.0, validate_positive],

# What to do when a record is scaled twice in the same direction
"scaling.reapply": ["raise", validate_choice("raise", "warn", "ignore")],
# Relative tolerance when checking that a sequence of quantities is homogeneous
"scaling.rtol": [1e-12, validate_positive],

}


class RcParams(dict):
    """A dict of configuration values that validates on assignment."""

    def __init__(self, defaults):
        self._validators = {key: entry[1] for key, entry in defaults.items()}
        super().__init__({key: entry[0] for key, entry in defaults.items()})

    def __setitem__(self, key, value):
        try:
            validator = self._validators[key]
        except KeyError:
            raise KeyError(f"{key!r} is not a valid rc parameter") from None
        super().__setitem__(key, validator(value))

    def update(self, *args, **kwargs):
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def family(self, prefix):
        """The four characteristic inputs of one unit family, as kwargs."""
        return {
            name: self[f"{prefix}.{name}"]
            for name in ("length", "temperature", "stress", "viscosity")
        }


rcParams = RcParams(_DEFAULTS)


def reset_rcparams():
    """Restore every parameter to its default."""
    dict.update(rcParams, {key: entry[0] for key, entry in _DEFAULTS.items()})


@contextmanager
def rc_context(overrides=None, **kwargs):
    """Temporarily override rc parameters."""
    saved = copy.copy(dict(rcParams))
    try:
        rcParams.update(overrides or {}, **kwargs)
        yield rcParams
    finally:
        dict.update(rcParams, saved)
        logger.debug("Restored rc parameters")
