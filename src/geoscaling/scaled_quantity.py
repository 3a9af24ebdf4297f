"""
ScaledQuantity - a material parameter value that remembers its units.

Non-dimensionalisation strips the units from a number, after which there is no
way to tell how to turn it back into a physical value. ScaledQuantity keeps
the original unit next to the value:

- .value → the quantity (dimensional) or the bare number/array (non-dimensional)
- .unit  → the original Pint unit, untouched by scaling

Arithmetic is deliberately not overloaded. Use the accessors ``value_of``,
``numeric_value_of`` and ``unit_of`` and the named functions ``add``,
``subtract``, ``multiply`` and ``divide``.

>>> from geoscaling.units import ureg
>>> v = ScaledQuantity(8.1 * ureg("cm/yr"))
>>> v.unit
<Unit('centimeter / year')>
"""

import copy
import math
import operator
from typing import Any, Optional, Union

import numpy as np
import pint

from . import units as _units
from ._rcparams import rcParams


class ScaledQuantity:
    """
    A value and the unit it is expressed in.

    Parameters
    ----------
    value : float, int, array-like or pint.Quantity
        The value. Lists of quantities are collected into one quantity array,
        expressed in the units of the first element.
    unit : str or pint.Unit, optional
        Unit to attach to a bare value. If ``value`` is already a quantity it
        is converted to this unit.
    registry : pint.UnitRegistry, optional
        Registry used to parse ``unit``; defaults to ``geoscaling.units.ureg``.

    Examples
    --------
    >>> z = ScaledQuantity([[100, 1000, 11], [10, 2, 1]], "km")
    >>> z[1, 1]
    <Quantity(2, 'kilometer')>
    """

    __slots__ = ("value", "unit")

    def __init__(self, value: Any, unit: Optional[Union[str, pint.Unit]] = None, registry=None):
        registry = _units.ureg if registry is None else registry
        if isinstance(value, ScaledQuantity):
            value = copy.deepcopy(value.value)
        value = _collect(value, registry)
        # scaling works on the stored value in place, the caller keeps its own
        if isinstance(value, (pint.Quantity, np.ndarray)):
            value = copy.copy(value)

        if unit is not None:
            unit = _units.as_unit(unit, registry)
            if isinstance(value, pint.Quantity):
                value = _units.convert(value, unit)
            else:
                value = registry.Quantity(value, unit)
        elif isinstance(value, pint.Quantity):
            unit = value.units
        else:
            unit = registry.dimensionless

        self.value = value
        self.unit = unit

    @property
    def is_dimensional(self) -> bool:
        """True while the value carries its units."""
        return _units.has_units(self.value)

    @property
    def shape(self):
        return np.shape(_units.magnitude(self.value))

    def __len__(self):
        return len(_units.magnitude(self.value))

    def __getitem__(self, index):
        return self.value[index]

    def __setitem__(self, index, item):
        self.value[index] = item

    def copy(self):
        return ScaledQuantity.from_parts(copy.deepcopy(self.value), self.unit)

    @classmethod
    def from_parts(cls, value, unit):
        """Build without any conversion, e.g. for an already scaled value."""
        obj = cls.__new__(cls)
        obj.value = value
        obj.unit = unit
        return obj

    def __eq__(self, other):
        if not isinstance(other, ScaledQuantity):
            return NotImplemented
        return self.unit == other.unit and np.all(self.value == other.value)

    __hash__ = None

    def __repr__(self):
        state = "" if self.is_dimensional or self.unit.dimensionless else f", unit={self.unit}"
        return f"ScaledQuantity({self.value!r}{state})"

    def __str__(self):
        return str(self.value)


def is_quantity_sequence(value) -> bool:
    """True for (nested) lists, tuples and object arrays holding any quantity."""
    if not (isinstance(value, (list, tuple)) or (isinstance(value, np.ndarray) and value.dtype == object)):
        return False
    items, _ = _flatten(value)
    return any(isinstance(item, pint.Quantity) for item in items)


def _flatten(values):
    # numpy must not see the quantities: it would strip their units
    if isinstance(values, np.ndarray):
        return list(values.ravel()), values.shape
    if isinstance(values, (list, tuple)):
        if values and isinstance(values[0], (list, tuple)):
            parts = [_flatten(v) for v in values]
            inner = parts[0][1]
            if any(shape != inner for _, shape in parts):
                raise ValueError("Ragged sequences cannot be collected into an array")
            return [item for items, _ in parts for item in items], (len(values),) + inner
        return list(values), (len(values),)
    return [values], ()


def _collect(value, registry):
    """Turn lists and object arrays of quantities into one quantity array."""
    if isinstance(value, range):
        return np.asarray(value)
    if is_quantity_sequence(value):
        return collect_quantities(value, registry)
    if isinstance(value, (list, tuple)):
        return np.asarray(value)
    return value


def _same_dimension(a, b, rtol):
    # composed powers pick up float noise, e.g. -3.0500000000000003
    if set(a) != set(b):
        return False
    return all(math.isclose(a[key], b[key], rel_tol=rtol) for key in a)


def collect_quantities(values, registry=None) -> pint.Quantity:
    """
    Collect a (nested) sequence of quantities into one quantity array.

    Every element is expressed in the units of the first one. Elements with a
    different dimension, or without units, are rejected. Powers are compared
    with the relative tolerance ``rcParams["scaling.rtol"]``.

    Raises
    ------
    DimensionalityError
        If the elements do not share one dimension.
    """
    registry = _units.ureg if registry is None else registry
    rtol = rcParams["scaling.rtol"]
    items, shape = _flatten(values)
    first = items[0]
    if not isinstance(first, pint.Quantity):
        raise _units.DimensionalityError("The first element of the sequence has no units")
    unit = first.units
    dimensionality = first.dimensionality

    magnitudes = np.empty(len(items), dtype=float)
    for i, item in enumerate(items):
        if not isinstance(item, pint.Quantity) or not _same_dimension(item.dimensionality, dimensionality, rtol):
            raise _units.DimensionalityError(
                f"Element {i} ({item}) does not have the dimension of the first element ({first})"
            )
        magnitudes[i] = item.m_as(unit)
    return registry.Quantity(magnitudes.reshape(shape), unit)


def value_of(x):
    """The value held by ``x`` (``x`` itself if it is not a ScaledQuantity)."""
    if isinstance(x, ScaledQuantity):
        return x.value
    return x


def numeric_value_of(x):
    """The value of ``x`` with any units stripped."""
    return _units.magnitude(value_of(x))


def unit_of(x):
    """The unit remembered by ``x`` (the quantity's unit, or None for bare values)."""
    if isinstance(x, ScaledQuantity):
        return x.unit
    if isinstance(x, pint.Quantity):
        return x.units
    return None


def _combine(op, x, y):
    result = op(value_of(x), value_of(y))
    # Quantities and arrays stay wrapped, pure numbers are handed back as they are
    if isinstance(result, pint.Quantity) or isinstance(result, np.ndarray):
        return ScaledQuantity(result)
    return result


def add(x, y):
    """``x + y`` for any mix of ScaledQuantity, quantities, arrays and numbers."""
    return _combine(operator.add, x, y)


def subtract(x, y):
    """``x - y`` for any mix of ScaledQuantity, quantities, arrays and numbers."""
    return _combine(operator.sub, x, y)


def multiply(x, y):
    """``x * y`` for any mix of ScaledQuantity, quantities, arrays and numbers."""
    return _combine(operator.mul, x, y)


def divide(x, y):
    """``x / y`` for any mix of ScaledQuantity, quantities, arrays and numbers."""
    return _combine(operator.truediv, x, y)
