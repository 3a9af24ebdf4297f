# geoscaling/units.py
"""
Units registry and dimensional analysis helpers for geoscaling.

All unit handling is delegated to Pint. This module owns the single
``pint.UnitRegistry`` used by the package, the exception hierarchy for
units-related failures, and the small boundary surface the scaling engine
consumes from Pint:

- dimension_signature() - Decompose a quantity or unit into base-dimension powers
- to_canonical() - Convert a quantity to SI base units
- convert() - Convert a quantity to compatible units
- has_units() - Check whether a value carries a non-trivial unit

Quantities from different registries cannot be combined, so every quantity
that is handed to the scaling functions must be created from ``ureg`` (or
from the registry a set of characteristic scales was built with).
"""

import logging
from enum import Enum
from typing import Any, Optional, Tuple

import numpy as np
import pint
import sympy

logger = logging.getLogger(__name__)


class UnitsError(Exception):
    """Exception raised for units-related errors."""

    pass


class DimensionalityError(UnitsError):
    """Exception raised for dimensional inconsistency errors."""

    pass


class UnitMismatchError(UnitsError):
    """Exception raised when a value carries units where none are allowed."""

    pass


class ShapeMismatchError(UnitsError):
    """Exception raised when phase arrays do not match the data arrays."""

    pass


class ScalingStateError(UnitsError):
    """Exception raised when a record is scaled twice in the same direction."""

    pass


class BaseDimension(Enum):
    """Base dimensions from which every derived unit is built."""

    LENGTH = "[length]"
    MASS = "[mass]"
    TIME = "[time]"
    TEMPERATURE = "[temperature]"
    AMOUNT = "[substance]"
    # No characteristic value is ever defined for these two
    CURRENT = "[current]"
    LUMINOSITY = "[luminosity]"


# Units that are convenient in geodynamics but missing from Pint's defaults.
# ``Myr`` itself already parses through Pint's prefix handling (mega + year).
_GEO_DEFINITIONS = [
    "million_years = 1e6 * year",
]


def create_registry(**kwargs) -> pint.UnitRegistry:
    """
    Build a unit registry with the geodynamics units defined.

    Offset units (degC) are converted to kelvin automatically when they take
    part in multiplications, which is what material laws such as
    ``alpha * (T - T0)`` need.

    Parameters
    ----------
    **kwargs
        Passed on to ``pint.UnitRegistry``.

    Returns
    -------
    pint.UnitRegistry
    """
    kwargs.setdefault("autoconvert_offset_to_baseunit", True)
    registry = pint.UnitRegistry(**kwargs)
    for definition in _GEO_DEFINITIONS:
        registry.define(definition)
    logger.debug("Created unit registry with %d geodynamic definitions", len(_GEO_DEFINITIONS))
    return registry


# The process-wide registry. Construct quantities from this object.
ureg = create_registry()

km = ureg.kilometer
m = ureg.meter
cm = ureg.centimeter
mm = ureg.millimeter
Myrs = ureg.million_years
yr = ureg.year
s = ureg.second
kg = ureg.kilogram
g = ureg.gram
Pa = ureg.pascal
MPa = ureg.megapascal
kbar = ureg.kilobar
Pas = ureg.pascal * ureg.second
K = ureg.kelvin
C = ureg.degC
mol = ureg.mole
kJ = ureg.kilojoule
J = ureg.joule
Watt = ureg.watt
uW = ureg.microwatt


def quantity(value, units, registry: Optional[pint.UnitRegistry] = None) -> pint.Quantity:
    """
    Create a quantity, safe for offset units such as degC.

    Example
    -------
    >>> T0 = quantity(0.0, "degC")
    """
    registry = ureg if registry is None else registry
    if isinstance(value, (list, tuple)):
        value = np.asarray(value)
    return registry.Quantity(value, units)


def as_unit(units, registry: Optional[pint.UnitRegistry] = None) -> pint.Unit:
    """Return a ``pint.Unit`` from a unit string, unit or quantity."""
    if isinstance(units, pint.Unit):
        return units
    if isinstance(units, pint.Quantity):
        return units.units
    registry = ureg if registry is None else registry
    if isinstance(units, str):
        return registry.parse_units(units)
    raise TypeError(f"Cannot interpret {units!r} as a unit")


def has_units(obj: Any) -> bool:
    """
    True if ``obj`` carries a non-trivial unit.

    Strings, plain numbers, bare arrays and unitless quantities report False.
    Objects exposing a ``value`` holding a quantity (ScaledQuantity) are
    inspected through that value.
    """
    if isinstance(obj, pint.Quantity):
        return not obj.unitless
    inner = getattr(obj, "value", None)
    if isinstance(inner, pint.Quantity):
        return not inner.unitless
    return False


def _dimensionality(obj, registry=None):
    if isinstance(obj, (pint.Quantity, pint.Unit)):
        return obj.dimensionality
    if isinstance(obj, str):
        return as_unit(obj, registry).dimensionality
    unit = getattr(obj, "unit", None)
    if isinstance(unit, pint.Unit):
        return unit.dimensionality
    raise TypeError(f"Cannot determine the dimensionality of {type(obj).__name__}")


def _as_rational(power) -> sympy.Rational:
    if isinstance(power, float):
        # str() gives the shortest exact decimal, so -3.05 becomes -61/20
        return sympy.Rational(str(power))
    return sympy.Rational(power)


_DIMENSIONS_BY_NAME = {dim.value: dim for dim in BaseDimension}


def dimension_signature(obj, registry: Optional[pint.UnitRegistry] = None) -> Tuple[Tuple[BaseDimension, sympy.Rational], ...]:
    """
    Decompose the dimension of ``obj`` into base-dimension powers.

    Parameters
    ----------
    obj : pint.Quantity, pint.Unit, str or ScaledQuantity
        Anything with a physical dimension.

    Returns
    -------
    tuple of (BaseDimension, sympy.Rational)
        Ordered as Pint reports them; empty for dimensionless input.

    Example
    -------
    >>> dict(dimension_signature(ureg("Pa**-3.05 / s")))[BaseDimension.MASS]
    -61/20
    """
    signature = []
    for name, power in _dimensionality(obj, registry).items():
        if power == 0:
            continue
        try:
            dimension = _DIMENSIONS_BY_NAME[name]
        except KeyError:
            raise DimensionalityError(f"Unsupported base dimension {name}") from None
        signature.append((dimension, _as_rational(power)))
    return tuple(signature)


def to_canonical(obj, registry: Optional[pint.UnitRegistry] = None) -> pint.Quantity:
    """Convert a quantity (or unit, taken as one of it) to SI base units."""
    if isinstance(obj, pint.Quantity):
        return obj.to_base_units()
    if isinstance(obj, pint.Unit):
        return obj._REGISTRY.Quantity(1.0, obj).to_base_units()
    if isinstance(obj, str):
        registry = ureg if registry is None else registry
        return registry.Quantity(1.0, as_unit(obj, registry)).to_base_units()
    raise TypeError(f"Cannot convert {type(obj).__name__} to base units")


def base_units_of(units, registry: Optional[pint.UnitRegistry] = None) -> pint.Unit:
    """The SI base unit with the same dimension as ``units``."""
    return to_canonical(as_unit(units, registry), registry).units


def convert(obj: pint.Quantity, units) -> pint.Quantity:
    """
    Convert a quantity to compatible units.

    Raises
    ------
    DimensionalityError
        If the units are not compatible.
    """
    try:
        return obj.to(units)
    except pint.errors.DimensionalityError as e:
        raise DimensionalityError(str(e)) from e


def magnitude(obj):
    """The numeric part of ``obj`` (the object itself if it has no units)."""
    if isinstance(obj, pint.Quantity):
        return obj.magnitude
    return obj
