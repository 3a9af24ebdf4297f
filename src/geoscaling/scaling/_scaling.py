"""
Utilities to convert between dimensional and non-dimensional values.
"""
import copy
import logging
import warnings
from functools import partial

import numpy as np
import pint

from .. import units as _units
from .._rcparams import rcParams
from ..materials._base import MaterialVisitor, ScalableRecord
from ..scaled_quantity import ScaledQuantity, collect_quantities, is_quantity_sequence
from ..units import ScalingStateError, dimension_signature
from ._scales import CharacteristicScales

logger = logging.getLogger(__name__)


def characteristic_factor(obj, scales: CharacteristicScales) -> float:
    """
    The characteristic value of the dimension of ``obj``.

    The dimension is decomposed into base-dimension powers and the factor is
    the product of the characteristic SI value of each base dimension raised
    to its power. Powers may be fractional (stress exponents of creep laws).

    Parameters
    ----------
    obj : pint.Quantity, pint.Unit, str or ScaledQuantity
        Anything with a physical dimension.
    scales : CharacteristicScales

    Returns
    -------
    float
        Multiplier that takes a non-dimensional value to SI base units.

    Example
    -------
    >>> scales = geo_scales()
    >>> characteristic_factor(units.ureg("m/s"), scales)  # length / time
    1e-07
    """
    factor = 1.0
    for dimension, power in dimension_signature(obj, scales.registry):
        factor *= scales.primary(dimension) ** float(power)
    logger.debug("Characteristic factor of %s: %g", getattr(obj, "dimensionality", obj), factor)
    return factor


def non_dimensionalise(dimValue, scales: CharacteristicScales):
    """
    Non-dimensionalise (scale) provided quantity.

    This function uses pint to perform a dimension analysis and
    return a value scaled according to the characteristic scales.
    The input is never modified; see :func:`non_dimensionalise_inplace`.

    Parameters
    ----------
    dimValue : pint.Quantity, str, number, array, sequence of quantities, ScaledQuantity or record
        Strings and values without units are returned unchanged.
        Sequences of quantities must all share one dimension.
        ScaledQuantity and records (or lists/dicts of records) are copied
        and the copy is scaled.
    scales : CharacteristicScales

    Returns
    -------
    float, array, ScaledQuantity or record
        The scaled value.

    Example
    -------
    >>> scales = geo_scales()
    >>> non_dimensionalise(3 * units.ureg("cm/yr"), scales)
    0.009506426344208684

    In geodynamics one sometimes encounters more funky units:

    >>> A = 6.3e-2 * units.ureg("MPa**-3.05 / s")
    >>> non_dimensionalise(A, scales)
    7.068716262102384e14
    """
    if isinstance(dimValue, str):
        return dimValue

    if isinstance(dimValue, ScaledQuantity) or _is_records(dimValue):
        result = copy.deepcopy(dimValue)
        non_dimensionalise_inplace(result, scales)
        return result

    if is_quantity_sequence(dimValue):
        dimValue = collect_quantities(dimValue, scales.registry)

    if not isinstance(dimValue, pint.Quantity):
        return dimValue

    if dimValue.unitless:
        if dimValue.units == dimValue._REGISTRY.dimensionless:
            return dimValue
        # a ratio such as km/m is a plain number once expressed in base units
        return dimValue.to_base_units().magnitude

    combined = _unit_factor(dimValue.units, scales)
    if combined is not None:
        return dimValue.magnitude / combined
    dimValue = dimValue.to_base_units()
    return dimValue.magnitude / characteristic_factor(dimValue, scales)


def dimensionalise(value, units, scales: CharacteristicScales):
    """
    Dimensionalise a value.

    Parameters
    ----------
    value : float, int or array
        The non-dimensional value.
    units : str, pint.Unit or pint.Quantity
        The units to be assigned. May be None if ``value`` is a
        ScaledQuantity, in which case its remembered unit is used.
    scales : CharacteristicScales

    Returns
    -------
    pint.Quantity or ScaledQuantity
        The dimensionalised value (a new ScaledQuantity for ScaledQuantity
        input).

    Example
    -------
    >>> scales = geo_scales()
    >>> v = non_dimensionalise(3 * units.ureg("cm/yr"), scales)
    >>> dimensionalise(v, "cm/yr", scales)
    <Quantity(3.0, 'centimeter / year')>
    """
    if isinstance(value, ScaledQuantity):
        result = value.copy()
        if units is not None:
            result.unit = _units.as_unit(units, scales.registry)
        dimensionalise_inplace(result, scales)
        return result

    if _is_records(value):
        result = copy.deepcopy(value)
        dimensionalise_inplace(result, scales)
        return result

    if isinstance(value, (list, tuple)):
        value = np.asarray(value, dtype=float)
    units = _units.as_unit(units, scales.registry)
    combined = _unit_factor(units, scales)
    if combined is not None:
        return units._REGISTRY.Quantity(value * combined, units)
    factor = characteristic_factor(units, scales)
    base = _units.base_units_of(units)
    return _units.convert(units._REGISTRY.Quantity(value * factor, base), units)


def non_dimensionalise_inplace(obj, scales: CharacteristicScales, unit=None):
    """
    Non-dimensionalise ``obj`` in place.

    This is the allocation-free path for large arrays: float arrays are
    converted and divided in their own memory.

    Parameters
    ----------
    obj : ScaledQuantity, record, list/tuple/dict of records, or numpy.ndarray
        A ScaledQuantity gets a bare value and keeps its unit. Records are
        scaled as a whole (no field is touched if any of them fails) and
        flagged ``nondimensional``. A bare float array is taken to hold
        values in ``unit``.
    scales : CharacteristicScales
    unit : str or pint.Unit, optional
        Only for bare arrays.

    Returns
    -------
    The same object.
    """
    return _transform_inplace(obj, scales, unit, forward=True)


def dimensionalise_inplace(obj, scales: CharacteristicScales, unit=None):
    """
    Dimensionalise ``obj`` in place; the inverse of :func:`non_dimensionalise_inplace`.

    A ScaledQuantity gets its value back as a quantity in its remembered unit.

    Example
    -------
    >>> x = ScaledQuantity(3 * units.ureg("cm/yr"))
    >>> non_dimensionalise_inplace(x, scales)
    >>> dimensionalise_inplace(x, scales).value
    <Quantity(3.0, 'centimeter / year')>
    """
    return _transform_inplace(obj, scales, unit, forward=False)


def is_dimensional(obj) -> bool:
    """
    True if any ScaledQuantity field of the record(s) currently carries units.

    Also accepts a single ScaledQuantity or quantity.
    """
    if isinstance(obj, ScaledQuantity):
        return obj.is_dimensional
    if not _is_records(obj):
        return _units.has_units(obj)

    finder = _DimensionalFieldFinder()
    for record in _iter_records(obj):
        record.accept(finder)
    return finder.found


def _is_records(obj):
    if isinstance(obj, ScalableRecord):
        return True
    if isinstance(obj, dict):
        items = list(obj.values())
    elif isinstance(obj, (list, tuple)):
        items = list(obj)
    else:
        return False
    return bool(items) and all(isinstance(item, ScalableRecord) for item in items)


def _iter_records(obj):
    if isinstance(obj, ScalableRecord):
        return [obj]
    if isinstance(obj, dict):
        return list(obj.values())
    return list(obj)


def _transform_inplace(obj, scales, unit, forward):
    if isinstance(obj, ScaledQuantity):
        step = _plan_quantity(obj, scales, forward)
        if step is not None:
            step()
        return obj

    if _is_records(obj):
        _transform_records(_iter_records(obj), scales, forward)
        return obj

    if isinstance(obj, np.ndarray):
        if unit is None:
            raise ValueError("A unit is needed to scale a bare array in place")
        return _transform_array(obj, unit, scales, forward)

    raise TypeError(f"Cannot scale {type(obj).__name__} in place")


def _unitless(unit):
    return unit == unit._REGISTRY.dimensionless


def _unit_factor(unit, scales):
    """
    Multiplier taking a non-dimensional value straight to a magnitude in ``unit``.

    Folding the conversion to base units into the characteristic factor
    makes a round trip a single ``x / f * f``. Offset units (degC) have no
    such multiplier and give None.
    """
    one = unit._REGISTRY.Quantity(1.0, unit)
    if not one._is_multiplicative:
        return None
    return characteristic_factor(unit, scales) / one.to_base_units().magnitude


def _plan_quantity(quantity, scales, forward):
    """Compute the factor now, return the mutation to run later (or None)."""
    if forward and not quantity.is_dimensional:
        return None  # nothing to strip
    if not forward and (quantity.is_dimensional or _unitless(quantity.unit)):
        return None  # nothing to restore
    unit = quantity.value.units if forward else quantity.unit
    combined = _unit_factor(unit, scales)
    factor = characteristic_factor(unit, scales) if combined is None else None
    if forward:
        return partial(_strip_units, quantity, combined, factor)
    return partial(_restore_units, quantity, combined, factor)


def _strip_units(quantity, combined, factor):
    value = quantity.value
    mag = value.magnitude
    if isinstance(mag, np.ndarray):
        if not np.issubdtype(mag.dtype, np.floating):
            value = value._REGISTRY.Quantity(mag.astype(float), value.units)
        if combined is None:
            # offset units go through kelvin
            value.ito_base_units()
            mag = value.magnitude
            mag /= factor
        else:
            mag = value.magnitude
            mag /= combined
        quantity.value = mag
    elif combined is None:
        quantity.value = value.to_base_units().magnitude / factor
    else:
        quantity.value = mag / combined


def _restore_units(quantity, combined, factor):
    unit = quantity.unit
    registry = unit._REGISTRY
    mag = quantity.value
    if isinstance(mag, np.ndarray):
        if not np.issubdtype(mag.dtype, np.floating):
            mag = mag.astype(float)
        if combined is None:
            mag *= factor
            value = registry.Quantity(mag, _units.base_units_of(unit))
            value.ito(unit)
        else:
            mag *= combined
            value = registry.Quantity(mag, unit)
        quantity.value = value
    elif combined is None:
        quantity.value = registry.Quantity(mag * factor, _units.base_units_of(unit)).to(unit)
    else:
        quantity.value = registry.Quantity(mag * combined, unit)


def _transform_array(array, unit, scales, forward):
    if not np.issubdtype(array.dtype, np.floating):
        raise TypeError(f"In-place scaling needs a floating point array, got {array.dtype}")
    unit = _units.as_unit(unit, scales.registry)
    combined = _unit_factor(unit, scales)
    if combined is not None:
        if forward:
            array /= combined
        else:
            array *= combined
        return array

    registry = unit._REGISTRY
    base = _units.base_units_of(unit)
    factor = characteristic_factor(unit, scales)
    if forward:
        registry.convert(array, unit, base, inplace=True)
        array /= factor
    else:
        array *= factor
        registry.convert(array, base, unit, inplace=True)
    return array


class _ScalingPlan(MaterialVisitor):
    """Collects every mutation of a record before any of them is applied."""

    def __init__(self, scales, forward):
        self.scales = scales
        self.forward = forward
        self.steps = []
        self.records = []
        # a law shared by several phases is scaled once
        self._seen = set()

    def _first_visit(self, obj):
        if id(obj) in self._seen:
            return False
        self._seen.add(id(obj))
        return True

    def add_record(self, record):
        if self._first_visit(record):
            self.records.append(record)
            record.accept(self)

    def visit_quantity(self, owner, name, quantity):
        if not self._first_visit(quantity):
            return
        step = _plan_quantity(quantity, self.scales, self.forward)
        if step is not None:
            self.steps.append(step)

    def visit_record(self, owner, name, record):
        self.add_record(record)

    def visit_table(self, owner, name, index, table):
        # lookup tables are re-read under the new scales, not scaled numerically
        rebuilt = table.rebuild(self.scales if self.forward else None)
        self.steps.append(partial(owner.replace_table, name, index, rebuilt))


class _DimensionalFieldFinder(MaterialVisitor):
    def __init__(self):
        self.found = False

    def visit_quantity(self, owner, name, quantity):
        if quantity.is_dimensional:
            self.found = True


def _needs_transform(record, forward):
    if record.nondimensional != forward:
        return True

    label = " ".join(filter(None, [type(record).__name__, getattr(record, "name", "")]))
    message = f"{label} is already {'non-dimensional' if forward else 'dimensional'}"
    policy = rcParams["scaling.reapply"]
    if policy == "raise":
        raise ScalingStateError(message)
    if policy == "warn":
        warnings.warn(f"{message}; leaving it unchanged", stacklevel=5)
    return False


def _transform_records(records, scales, forward):
    plan = _ScalingPlan(scales, forward)
    for record in records:
        if _needs_transform(record, forward):
            plan.add_record(record)

    # every factor is known at this point, nothing below can fail halfway
    for step in plan.steps:
        step()
    for record in plan.records:
        record.nondimensional = forward

    logger.debug(
        "%s %d records (%d fields)",
        "Non-dimensionalised" if forward else "Dimensionalised",
        len(plan.records),
        len(plan.steps),
    )


def ndargs(scales: CharacteristicScales):
    """Decorator used to non-dimensionalise the arguments of a function"""

    def convert(obj):
        if isinstance(obj, (list, tuple)) and not is_quantity_sequence(obj):
            return type(obj)([convert(val) for val in obj])
        elif isinstance(obj, dict) and not _is_records(obj):
            return {key: convert(val) for key, val in obj.items()}
        else:
            return non_dimensionalise(obj, scales)

    def decorator(f):
        def new_f(*args, **kwargs):
            nd_args = [convert(arg) for arg in args]
            nd_kwargs = {name: convert(val) for name, val in kwargs.items()}
            return f(*nd_args, **nd_kwargs)

        new_f.__name__ = f.__name__
        new_f.__doc__ = f.__doc__
        return new_f

    return decorator
