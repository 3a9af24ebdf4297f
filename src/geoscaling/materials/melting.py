"""
Melt fraction parameterisations.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
import pint
import sympy

from ..scaled_quantity import numeric_value_of, value_of
from ._base import MaterialParam, is_table, quantity_field
from ._phases import compute_by_phase, law_of

_phi, _T = sympy.symbols(r"\phi T")


@dataclass
class MeltingParam_Caricchi(MaterialParam):
    """
    Temperature dependent melt fraction used by Caricchi et al.

    .. math::
        \\phi = 1 / (1 + \\exp((a - (T - c)) / b))

    with ``T`` in K, so that ``T - c`` is the temperature in °C.
    """

    equation = sympy.Eq(_phi, 1 / (1 + sympy.exp((sympy.Symbol("a") - (_T - sympy.Symbol("c"))) / sympy.Symbol("b"))))

    a: Any = quantity_field(800.0, "K")
    b: Any = quantity_field(23.0, "K")
    c: Any = quantity_field(273.15, "K")

    def __str__(self):
        return "Caricchi et al. melting parameterization"


def _theta(a, b, c, T):
    return (a - (T - c)) / b


def compute_melting_param(law, P, T):
    """
    Melt fraction at temperature ``T``.

    Works with a dimensional law and ``T`` as a quantity, or with a
    non-dimensional law and a non-dimensional ``T``. Phase-diagram tables are
    read from their ``melt_fraction`` column.
    """
    law = law_of(law, "melting")
    if is_table(law):
        return law.interpolate("melt_fraction", T, P)

    if isinstance(law, MeltingParam_Caricchi):
        theta = _theta(value_of(law.a), value_of(law.b), value_of(law.c), T)
        if isinstance(theta, pint.Quantity):
            theta = theta.to("dimensionless").magnitude
        return 1.0 / (1.0 + np.exp(theta))

    raise TypeError(f"No melting parameterisation for {type(law).__name__}")


def compute_melting_param_inplace(out, P, T, law):
    """In-place melt fraction, from the numeric values of the law's fields."""
    law = law_of(law, "melting")
    if is_table(law):
        out[...] = numeric_value_of(law.interpolate("melt_fraction", T, P))
    elif isinstance(law, MeltingParam_Caricchi):
        theta = _theta(numeric_value_of(law.a), numeric_value_of(law.b), numeric_value_of(law.c), T)
        out[...] = 1.0 / (1.0 + np.exp(theta))
    else:
        raise TypeError(f"No melting parameterisation for {type(law).__name__}")
    return out


def compute_melting_param_phases(out, phases, P, T, mat_params):
    """Melt fraction for a domain with several phases, see ``compute_density_phases``."""
    return compute_by_phase(out, phases, P, T, mat_params, "melting", compute_melting_param_inplace)
