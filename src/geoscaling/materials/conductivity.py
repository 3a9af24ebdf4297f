"""
Thermal conductivity laws.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
import pint
import sympy

from ..scaled_quantity import numeric_value_of, value_of
from ..units import quantity
from ._base import MaterialParam, quantity_field
from ._phases import compute_by_phase, law_of

_k, _T, _P = sympy.symbols("k T P")
_a, _b, _c, _d = sympy.symbols("a_k b_k c_k d_k")


@dataclass
class ConstantConductivity(MaterialParam):
    """Constant conductivity, :math:`k = cst` [W/m/K]."""

    equation = sympy.Eq(_k, sympy.Symbol("cst"))

    k: Any = quantity_field(3.0, "W/m/K")

    def __str__(self):
        return f"Constant conductivity: k={value_of(self.k)}"


@dataclass
class T_Conductivity_Whittacker(MaterialParam):
    """
    Temperature dependent conductivity of average crust, after
    Whittacker et al. (2009), Nature.

    Their parameterisation gives heat capacity and diffusivity,

    .. math::
        C_p = (a + b T - c / T^2) / M

        \\kappa = d / T - e \\quad (T \\le T_{cutoff}), \\qquad
        \\kappa = f - g T \\quad (T > T_{cutoff})

    and the conductivity follows as :math:`k = \\kappa \\rho C_p`, with the
    low temperature coefficients ``a0, b0, c0`` below 846 K and ``a1, b1, c1``
    above.
    """

    equation = sympy.Eq(_k, sympy.Function("f")(_T))

    a0: Any = quantity_field(199.5, "J/mol/K")
    a1: Any = quantity_field(229.32, "J/mol/K")
    b0: Any = quantity_field(0.0857, "J/mol/K**2")
    b1: Any = quantity_field(0.0323, "J/mol/K**2")
    c0: Any = quantity_field(5e6, "J/mol*K")
    c1: Any = quantity_field(47.9e-6, "J/mol*K")
    molmass: Any = quantity_field(0.22178, "kg/mol")
    Tcutoff: Any = quantity_field(846.0, "K")
    rho: Any = quantity_field(2700.0, "kg/m**3")
    d: Any = quantity_field(576.3e-6, "m**2/s*K")
    e: Any = quantity_field(0.062e-6, "m**2/s")
    f: Any = quantity_field(0.732e-6, "m**2/s")
    g: Any = quantity_field(0.000135e-6, "m**2/s/K")

    def __str__(self):
        return "T-dependent conductivity following Whittacker et al. (2009) for average crust"


@dataclass
class TP_Conductivity(MaterialParam):
    """
    Temperature and pressure dependent conductivity,

    .. math::
        k = \\left(a_k + \\frac{b_k}{T + c_k}\\right)(1 + d_k P)

    The defaults are those of the lower crust in table 21.2 of Gerya (2019).
    With ``d = 0`` the pressure is not used.
    """

    equation = sympy.Eq(_k, (_a + _b / (_T + _c)) * (1 + _d * _P))

    a: Any = quantity_field(1.18, "W/K/m")
    b: Any = quantity_field(474.0, "W/m")
    c: Any = quantity_field(77.0, "K")
    d: Any = quantity_field(0.0, "1/MPa")
    comment: str = ""

    def __str__(self):
        a, b, c, d = (value_of(x) for x in (self.a, self.b, self.c, self.d))
        if numeric_value_of(self.d) == 0:
            return f"T/P dependent conductivity: k = {a} + {b}/(T + {c})"
        return f"T/P dependent conductivity: k = ({a} + {b}/(T + {c}))*(1 + {d}*P)"


_GERYA = "as listed in table 21.2 of Gerya (2019)"

TP_CONDUCTIVITY_PRESETS = {
    "UpperCrust": dict(
        a=quantity(0.64, "W/K/m"), b=quantity(807.0, "W/m"), c=quantity(77.0, "K"), d=quantity(0.0, "1/MPa"),
        comment=f"Sediment/upper crust T-dependent conductivity, {_GERYA}",
    ),
    "LowerCrust": dict(
        a=quantity(1.18, "W/K/m"), b=quantity(474.0, "W/m"), c=quantity(77.0, "K"), d=quantity(0.0, "1/MPa"),
        comment=f"Lower crust T-dependent conductivity, {_GERYA}",
    ),
    "OceanicCrust": dict(
        a=quantity(1.18, "W/K/m"), b=quantity(474.0, "W/m"), c=quantity(77.0, "K"), d=quantity(0.0, "1/MPa"),
        comment=f"Oceanic crust T-dependent conductivity, {_GERYA}",
    ),
    "Mantle": dict(
        a=quantity(0.73, "W/K/m"), b=quantity(1293.0, "W/m"), c=quantity(77.0, "K"), d=quantity(4e-5, "1/MPa"),
        comment=f"Mantle T-dependent conductivity, {_GERYA}",
    ),
}


def set_tp_conductivity(name: str) -> TP_Conductivity:
    """
    A new :class:`TP_Conductivity` with the preset parameters of ``name``,
    one of ``TP_CONDUCTIVITY_PRESETS``.

    Every call builds a fresh record, so presets can be scaled independently.

    >>> k = set_tp_conductivity("Mantle")
    """
    try:
        kwargs = TP_CONDUCTIVITY_PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown conductivity preset {name!r}, choose from {sorted(TP_CONDUCTIVITY_PRESETS)}") from None
    return TP_Conductivity(**kwargs)


def _tp(law, P, T, get):
    a, b, c, d = get(law.a), get(law.b), get(law.c), get(law.d)
    if isinstance(c, pint.Quantity) and isinstance(T, pint.Quantity):
        T = T.to(c.units)
    k = a + b / (T + c)
    if numeric_value_of(law.d) == 0:
        return k
    return k * (1 + d * P)


def _whittacker(law, T, get):
    a0, b0, c0 = get(law.a0), get(law.b0), get(law.c0)
    a1, b1, c1 = get(law.a1), get(law.b1), get(law.c1)
    d, e, f, g = get(law.d), get(law.e), get(law.f), get(law.g)
    molmass, rho = get(law.molmass), get(law.rho)

    low = (a0 + b0 * T - c0 / T**2) / molmass * (d / T - e) * rho
    high = (a1 + b1 * T - c1 / T**2) / molmass * (f - g * T) * rho
    return low, high


def compute_conductivity(law, P, T):
    """
    Conductivity at pressure ``P`` and temperature ``T``. Only
    :class:`TP_Conductivity` with a non-zero ``d`` uses the pressure.

    Dimensional laws take and return quantities, non-dimensional laws
    numbers or arrays.
    """
    law = law_of(law, "conductivity")
    if isinstance(law, ConstantConductivity):
        value = value_of(law.k)
        if np.ndim(numeric_value_of(T)) > 0:
            return value * np.ones(np.shape(numeric_value_of(T)))
        return value

    if isinstance(law, T_Conductivity_Whittacker):
        low, high = _whittacker(law, T, value_of)
        below = numeric_value_of(T) <= numeric_value_of(_as_comparable(law.Tcutoff, T))
        if isinstance(low, pint.Quantity):
            low, high = low.to("W/m/K"), high.to("W/m/K")
            result = np.where(below, low.magnitude, high.magnitude)
            return low._REGISTRY.Quantity(float(result) if result.ndim == 0 else result, low.units)
        result = np.where(below, low, high)
        return float(result) if result.ndim == 0 else result

    if isinstance(law, TP_Conductivity):
        k = _tp(law, P, T, value_of)
        if isinstance(k, pint.Quantity):
            return k.to("W/m/K")
        return k

    raise TypeError(f"No conductivity computation for {type(law).__name__}")


def _as_comparable(cutoff, T):
    cutoff = value_of(cutoff)
    if isinstance(cutoff, pint.Quantity) and isinstance(T, pint.Quantity):
        return cutoff.to(T.units)
    return cutoff


def compute_conductivity_inplace(out, P, T, law):
    """
    In-place conductivity computation into the float array ``out``.

    Uses the numeric values of the law's fields, as the other in-place
    routines do.
    """
    law = law_of(law, "conductivity")
    if isinstance(law, ConstantConductivity):
        out[...] = numeric_value_of(law.k)
    elif isinstance(law, T_Conductivity_Whittacker):
        T = np.asarray(T, dtype=float)
        low, high = _whittacker(law, T, numeric_value_of)
        out[...] = np.where(T <= numeric_value_of(law.Tcutoff), low, high)
    elif isinstance(law, TP_Conductivity):
        out[...] = _tp(law, P, np.asarray(T, dtype=float), numeric_value_of)
    else:
        raise TypeError(f"No conductivity computation for {type(law).__name__}")
    return out


def compute_conductivity_phases(out, phases, P, T, mat_params):
    """Conductivity for a domain with several phases, see ``compute_density_phases``."""
    return compute_by_phase(out, phases, P, T, mat_params, "conductivity", compute_conductivity_inplace)
