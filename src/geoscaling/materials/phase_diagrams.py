"""
Phase-diagram lookup tables.

A table holds material properties (density, melt fraction, ...) tabulated on
a regular temperature/pressure grid and interpolates them bilinearly with
SciPy. The tabulated data are always kept in their dimensional form; scaling
a record that contains a table does not touch these numbers but builds a new
table whose interpolators work in non-dimensional space.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np
import pint
from scipy.interpolate import RegularGridInterpolator

from .. import units as _units
from ..units import ShapeMismatchError, UnitsError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PhaseDiagramTable:
    """
    Material properties tabulated on a (T, P) grid.

    Parameters
    ----------
    name : str
        Label, e.g. the file or rock the table was computed for.
    temperature, pressure : pint.Quantity
        1D grid axes, strictly increasing.
    properties : dict of str -> pint.Quantity
        Tabulated values, each of shape ``(len(temperature), len(pressure))``.
        Unitless properties (melt fraction) may be given as plain arrays.

    Example
    -------
    >>> T = quantity([500.0, 1000.0, 1500.0], "K")
    >>> P = quantity([0.0, 1.0], "GPa")
    >>> rho = quantity([[3300.0, 3350.0], [3250.0, 3300.0], [3200.0, 3250.0]], "kg/m**3")
    >>> table = PhaseDiagramTable("peridotite", T, P, {"density": rho})
    >>> table.interpolate("density", quantity(750.0, "K"), quantity(0.5, "GPa"))
    <Quantity(3300.0, 'kilogram / meter ** 3')>
    """

    is_phase_diagram = True

    name: str
    temperature: Any
    pressure: Any
    properties: Dict[str, Any] = field(default_factory=dict)
    scales: Optional[Any] = field(default=None, repr=False, compare=False)
    _interpolators: Dict[str, RegularGridInterpolator] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        self.temperature = _as_axis("temperature", self.temperature)
        self.pressure = _as_axis("pressure", self.pressure)
        shape = (len(self.temperature), len(self.pressure))
        for key, values in self.properties.items():
            if np.shape(_units.magnitude(values)) != shape:
                raise ShapeMismatchError(
                    f"Property {key!r} has shape {np.shape(_units.magnitude(values))}, the grid is {shape}"
                )

        T_axis = self._scaled(self.temperature)
        P_axis = self._scaled(self.pressure)
        for key, values in self.properties.items():
            self._interpolators[key] = RegularGridInterpolator(
                (T_axis, P_axis), np.asarray(self._scaled(values), dtype=float), bounds_error=False, fill_value=None
            )
        logger.debug("Built %d interpolators for table %s", len(self._interpolators), self.name)

    @property
    def nondimensional(self) -> bool:
        return self.scales is not None

    def _scaled(self, values):
        if self.scales is None:
            return _units.magnitude(values)
        from ..scaling import non_dimensionalise

        return non_dimensionalise(values, self.scales)

    def rebuild(self, scales) -> "PhaseDiagramTable":
        """
        A copy of this table interpolating in the space of ``scales``.

        ``scales=None`` gives back the dimensional table. The tabulated data
        are shared, never scaled.
        """
        return PhaseDiagramTable(self.name, self.temperature, self.pressure, self.properties, scales=scales)

    def _query(self, values, axis):
        if self.scales is not None:
            if _units.has_units(values):
                raise UnitsError(f"Table {self.name} is non-dimensional, got {values}")
            return np.asarray(values, dtype=float)
        if isinstance(values, pint.Quantity):
            return np.asarray(_units.convert(values, axis.units).magnitude, dtype=float)
        # bare numbers are taken to be in the units of the grid
        return np.asarray(values, dtype=float)

    def interpolate(self, key: str, T, P):
        """
        Interpolate property ``key`` at temperature ``T`` and pressure ``P``.

        Outside the grid values are extrapolated linearly.
        """
        try:
            interpolator = self._interpolators[key]
        except KeyError:
            raise KeyError(f"Table {self.name} has no property {key!r}") from None

        T = self._query(T, self.temperature)
        P = self._query(P, self.pressure)
        T, P = np.broadcast_arrays(T, P)
        result = interpolator(np.stack([T.ravel(), P.ravel()], axis=-1)).reshape(T.shape)
        if result.ndim == 0:
            result = float(result)

        values = self.properties[key]
        if self.scales is None and isinstance(values, pint.Quantity):
            return values._REGISTRY.Quantity(result, values.units)
        return result

    def __contains__(self, key):
        return key in self.properties


def _as_axis(name, values):
    if isinstance(values, pint.Quantity):
        values = values._REGISTRY.Quantity(np.asarray(values.magnitude, dtype=float), values.units)
    else:
        values = np.asarray(values, dtype=float)
    mag = _units.magnitude(values)
    if mag.ndim != 1 or len(mag) < 2 or np.any(np.diff(mag) <= 0):
        raise ValueError(f"The {name} axis must be 1D and strictly increasing")
    return values
