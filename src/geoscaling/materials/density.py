"""
Density laws.

Each law is a record of ScaledQuantity fields and works equally on
dimensional input (pint quantities) and on non-dimensional input (numbers or
arrays) once the law itself has been non-dimensionalised.

>>> law = PT_Density()
>>> compute_density(law, P=quantity(0.0, "MPa"), T=quantity(0.0, "degC"))
<Quantity(2900.0, 'kilogram / meter ** 3')>
"""

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
import pint
import sympy

from ..scaled_quantity import numeric_value_of, value_of
from ._base import MaterialParam, is_table, quantity_field
from ._phases import compute_by_phase, law_of

logger = logging.getLogger(__name__)

_rho, _rho0, _alpha, _beta = sympy.symbols(r"\rho \rho_0 \alpha \beta")
_T, _T0, _P, _P0 = sympy.symbols("T T_0 P P_0")


@dataclass
class ConstantDensity(MaterialParam):
    """Constant density, :math:`\\rho = cst`."""

    equation = sympy.Eq(_rho, sympy.Symbol("cst"))

    rho: Any = quantity_field(2900.0, "kg/m**3")

    def __str__(self):
        return f"Constant density: rho={value_of(self.rho)}"


@dataclass
class PT_Density(MaterialParam):
    """
    Pressure and temperature dependent density.

    .. math::
        \\rho = \\rho_0 (1 - \\alpha (T - T_0) + \\beta (P - P_0))
    """

    equation = sympy.Eq(_rho, _rho0 * (1 - _alpha * (_T - _T0) + _beta * (_P - _P0)))

    rho0: Any = quantity_field(2900.0, "kg/m**3")
    alpha: Any = quantity_field(3e-5, "1/K")
    beta: Any = quantity_field(1e-9, "1/Pa")
    T0: Any = quantity_field(0.0, "degC")
    P0: Any = quantity_field(0.0, "MPa")

    def __str__(self):
        return (
            f"P/T-dependent density: rho0={value_of(self.rho0)}, alpha={value_of(self.alpha)}, "
            f"beta={value_of(self.beta)}, T0={value_of(self.T0)}, P0={value_of(self.P0)}"
        )


def compute_density(law, P, T):
    """
    Density for pressure ``P`` and temperature ``T``.

    Parameters
    ----------
    law : ConstantDensity, PT_Density, PhaseDiagramTable or MaterialParams
        For a phase record the first density law is used.
    P, T : number, array or pint.Quantity
        Dimensional if the law is dimensional, non-dimensional otherwise.

    Returns
    -------
    Same type as the law's values (quantity or number/array).
    """
    law = law_of(law, "density")
    if is_table(law):
        return law.interpolate("density", T, P)

    if isinstance(law, ConstantDensity):
        value = value_of(law.rho)
        if np.ndim(numeric_value_of(T)) > 0:
            return value * np.ones(np.shape(numeric_value_of(T)))
        return value

    if isinstance(law, PT_Density):
        rho0, a, b = value_of(law.rho0), value_of(law.alpha), value_of(law.beta)
        T0, P0 = value_of(law.T0), value_of(law.P0)
        density = rho0 * (1.0 - a * (T - T0) + b * (P - P0))
        if isinstance(density, pint.Quantity) and isinstance(rho0, pint.Quantity):
            density = density.to(rho0.units)
        return density

    raise TypeError(f"No density computation for {type(law).__name__}")


def compute_density_inplace(out, P, T, law):
    """
    In-place density computation into the float array ``out``.

    The numeric values of the law's fields are used as they are, so ``P``
    and ``T`` must be expressed consistently with them (normally everything is
    non-dimensional).
    """
    law = law_of(law, "density")
    if is_table(law):
        out[...] = numeric_value_of(law.interpolate("density", T, P))
    elif isinstance(law, ConstantDensity):
        out[...] = numeric_value_of(law.rho)
    elif isinstance(law, PT_Density):
        rho0, a, b = numeric_value_of(law.rho0), numeric_value_of(law.alpha), numeric_value_of(law.beta)
        T0, P0 = numeric_value_of(law.T0), numeric_value_of(law.P0)
        out[...] = rho0 * (1.0 - a * (T - T0) + b * (P - P0))
    else:
        raise TypeError(f"No density computation for {type(law).__name__}")
    return out


def compute_density_phases(out, phases, P, T, mat_params):
    """
    Density for a domain with several phases.

    ``phases`` is either an integer array of phase ids, of the same shape as
    ``out`` (each point takes the density of the phase with that id), or a
    float array of phase fractions with one extra trailing dimension, one
    entry per item of ``mat_params`` (densities are averaged with these
    weights).

    Raises
    ------
    ShapeMismatchError
        If ``phases`` does not match ``out`` in one of these two ways.
    """
    return compute_by_phase(out, phases, P, T, mat_params, "density", compute_density_inplace)
