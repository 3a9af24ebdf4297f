"""
Characteristic scales used for non-dimensionalisation.

A ``CharacteristicScales`` record holds the characteristic length, temperature,
stress and viscosity chosen by the user, the characteristic time derived from
them (``viscosity / stress``, the Maxwell relaxation time) and the SI base
quantities that every other unit is scaled with.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import pint

from .. import units as _units
from .._rcparams import rcParams
from ..units import BaseDimension, DimensionalityError, UnitMismatchError

logger = logging.getLogger(__name__)


class UnitKind(Enum):
    """The unit family dimensional results are expressed in."""

    GEO = "GEO"
    SI = "SI"
    NONE = "NONE"


# Units the four user inputs (and the derived time) are stored in
_FAMILY_UNITS = {
    UnitKind.GEO: {
        "length": "km",
        "temperature": "degC",
        "stress": "MPa",
        "viscosity": "Pa*s",
        "time": "million_years",
    },
    UnitKind.SI: {
        "length": "m",
        "temperature": "K",
        "stress": "Pa",
        "viscosity": "Pa*s",
        "time": "s",
    },
}

# Characteristic SI quantity for every base dimension
_PRIMARY_FIELDS = {
    BaseDimension.LENGTH: "length_si",
    BaseDimension.MASS: "mass_si",
    BaseDimension.TIME: "time_si",
    BaseDimension.TEMPERATURE: "temperature_si",
    BaseDimension.AMOUNT: "amount_si",
    BaseDimension.CURRENT: None,
    BaseDimension.LUMINOSITY: None,
}


@dataclass(frozen=True)
class CharacteristicScales:
    """
    Characteristic values of a model, in one unit family.

    Construct with :func:`geo_scales`, :func:`si_scales` or
    :func:`dimensionless_scales` rather than directly.

    Attributes
    ----------
    kind : UnitKind
        Unit family of ``length``, ``temperature``, ``stress``, ``viscosity``
        and ``time``.
    length_si, temperature_si, stress_si, time_si, mass_si, amount_si
        The characteristic values in SI base units. These are what scaling
        factors are built from.
    force, energy, power, area, volume, velocity, density, acceleration,
    strainrate, heatcapacity, conductivity, diffusivity
        Derived characteristic values, in SI base units.
    """

    kind: UnitKind

    # user inputs, in the family units
    length: Any
    temperature: Any
    stress: Any
    viscosity: Any
    time: Any

    # primary characteristic values in SI base units
    length_si: Any
    temperature_si: Any
    stress_si: Any
    time_si: Any
    mass_si: Any
    amount_si: Any

    # derived characteristic values
    force: Any
    energy: Any
    power: Any
    area: Any
    volume: Any
    velocity: Any
    density: Any
    acceleration: Any
    strainrate: Any
    heatcapacity: Any
    conductivity: Any
    diffusivity: Any

    sec_year: float = 3600 * 24 * 365.25
    myrs: float = 1e6
    cm_year: float = 3600 * 24 * 365.25 * 100  # m/s -> cm/yr

    registry: Optional[pint.UnitRegistry] = field(default=None, repr=False, compare=False)

    def primary(self, dimension: BaseDimension) -> float:
        """
        The characteristic value of a base dimension, as an SI magnitude.

        Raises
        ------
        DimensionalityError
            For base dimensions without a characteristic value (current,
            luminosity).
        """
        name = _PRIMARY_FIELDS[dimension]
        if name is None:
            raise DimensionalityError(f"No characteristic value is defined for {dimension.value}")
        value = getattr(self, name)
        if isinstance(value, pint.Quantity):
            value = value.to_base_units().magnitude
        return float(value)

    @property
    def coefficients(self):
        """Mapping of base dimension to its characteristic SI value."""
        return OrderedDict(
            (dimension, getattr(self, name))
            for dimension, name in _PRIMARY_FIELDS.items()
            if name is not None
        )

    def __str__(self):
        return (
            f"Employing {self.kind.value} units \n"
            f"Characteristic values: \n"
            f"         length:      {_format(self.length)}\n"
            f"         time:        {_format(self.time, digits=4)}\n"
            f"         stress:      {_format(self.stress)}\n"
            f"         temperature: {_format(self.temperature)}\n"
        )

    def _repr_html_(self):
        header = (
            "<table style='border-collapse:collapse;'>"
            "<tr><th style='padding:4px 8px;border:1px solid #ccc;'>Dimension</th>"
            "<th style='padding:4px 8px;border:1px solid #ccc;'>Value</th></tr>"
        )
        footer = "</table>"
        html = ""
        for dimension, value in self.coefficients.items():
            html += (
                f"<tr>"
                f"<td style='padding:4px 8px;border:1px solid #ccc;'>{dimension.value}</td>"
                f"<td style='padding:4px 8px;border:1px solid #ccc;'>{_format(value, digits=4)}</td>"
                f"</tr>"
            )
        return f"<p>Employing {self.kind.value} units</p>" + header + html + footer


def _format(value, digits=None):
    if isinstance(value, pint.Quantity):
        mag = value.magnitude
        mag = round(mag, digits) if digits is not None else mag
        return f"{mag:g} {value.units:~}"
    return f"{value:g}"


def _base(value):
    if isinstance(value, pint.Quantity):
        return value.to_base_units()
    return value


def _derive(kind, registry, length, temperature, stress, viscosity, time, m, K, Pa, s, mol):
    """Populate the derived fields from the SI primaries."""
    kg = _base(Pa * m * s**2)  # this can be a very large number
    N = _base(kg * m / s**2)
    J = _base(N * m)
    W = _base(J / s)

    return CharacteristicScales(
        kind=kind,
        length=length,
        temperature=temperature,
        stress=stress,
        viscosity=viscosity,
        time=time,
        length_si=m,
        temperature_si=K,
        stress_si=Pa,
        time_si=s,
        mass_si=kg,
        amount_si=mol,
        force=N,
        energy=J,
        power=W,
        area=_base(m**2),
        volume=_base(m**3),
        velocity=_base(m / s),
        density=_base(kg / m**3),
        acceleration=_base(m / s**2),
        strainrate=_base(1 / s),
        heatcapacity=_base(J / kg / K),
        conductivity=_base(W / m / K),
        diffusivity=_base(m**2 / s),
        registry=registry,
    )


def _attach(name, value, default_unit, registry):
    """Attach the default unit to bare numbers, move quantities to ``registry``."""
    if isinstance(value, pint.Quantity):
        if value._REGISTRY is not registry:
            value = registry.Quantity(value.magnitude, str(value.units))
    else:
        value = registry.Quantity(float(value), default_unit)
    try:
        return value.to(default_unit)
    except pint.errors.DimensionalityError as e:
        raise DimensionalityError(f"Characteristic {name} {value} cannot be expressed in {default_unit}") from e


def _dimensional_scales(kind, registry, **inputs):
    registry = _units.ureg if registry is None else registry
    family = _FAMILY_UNITS[kind]
    defaults = rcParams.family(kind.value.lower())

    values = {}
    for name in ("length", "temperature", "stress", "viscosity"):
        value = inputs[name] if inputs[name] is not None else defaults[name]
        values[name] = _attach(name, value, family[name], registry)

    T_SI = values["temperature"].to("K")
    Le_SI = values["length"].to("m")
    Sigma_SI = values["stress"].to("Pa")
    Time_SI = (values["viscosity"] / Sigma_SI).to("s")
    t = Time_SI.to(family["time"])

    scales = _derive(
        kind,
        registry,
        time=t,
        m=Le_SI,
        K=T_SI,
        Pa=Sigma_SI,
        s=Time_SI,
        mol=registry.Quantity(1.0, "mol"),
        **values,
    )
    logger.info("Created %s characteristic scales: length=%s, time=%s", kind.value, scales.length, scales.time)
    return scales


def geo_scales(length=None, temperature=None, stress=None, viscosity=None, registry=None) -> CharacteristicScales:
    """
    Characteristic scales in GEO units.

    Upon dimensionalisation ``time`` is in Myr, ``length`` in km and
    ``stress`` in MPa, which suits typical geodynamic simulations better than
    SI units. Inputs may be given in any compatible unit; bare numbers are
    taken to be in km, °C, MPa and Pa s. Omitted inputs come from
    ``rcParams["geo.*"]`` (1000 km, 1000 °C, 10 MPa, 1e20 Pa s).

    Examples
    --------
    >>> scales = geo_scales()
    >>> print(scales)
    Employing GEO units
    Characteristic values:
             length:      1000 km
             time:        0.3169 million_years
             stress:      10 MPa
             temperature: 1000 °C

    >>> scales.velocity
    <Quantity(1e-07, 'meter / second')>

    A crustal-scale model is better served by a smaller length scale:

    >>> scales = geo_scales(length=10 * units.km)
    """
    return _dimensional_scales(
        UnitKind.GEO, registry, length=length, temperature=temperature, stress=stress, viscosity=viscosity
    )


def si_scales(length=None, temperature=None, stress=None, viscosity=None, registry=None) -> CharacteristicScales:
    """
    Characteristic scales in SI units.

    Bare numbers are taken to be in m, K, Pa and Pa s. Omitted inputs come from
    ``rcParams["si.*"]`` (1000 m, 1000 K, 10 Pa, 1e20 Pa s).

    >>> si_scales(length=1 * units.km).length
    <Quantity(1000.0, 'meter')>
    """
    return _dimensional_scales(
        UnitKind.SI, registry, length=length, temperature=temperature, stress=stress, viscosity=viscosity
    )


def _unitless(name, value):
    if _units.has_units(value):
        raise UnitMismatchError(f"{name} should not have units, got {value}")
    return float(_units.magnitude(value))


def dimensionless_scales(length=None, temperature=None, stress=None, viscosity=None, registry=None) -> CharacteristicScales:
    """
    Characteristic scales for a model that is already non-dimensional.

    Raises
    ------
    UnitMismatchError
        If any of the inputs carries units.
    """
    inputs = dict(length=length, temperature=temperature, stress=stress, viscosity=viscosity)
    defaults = rcParams.family("none")
    values = {
        name: _unitless(name, value if value is not None else defaults[name])
        for name, value in inputs.items()
    }

    time = values["viscosity"] / values["stress"]
    scales = _derive(
        UnitKind.NONE,
        _units.ureg if registry is None else registry,
        time=time,
        m=values["length"],
        K=values["temperature"],
        Pa=values["stress"],
        s=time,
        mol=1.0,
        **values,
    )
    logger.info("Created NONE characteristic scales: length=%g, time=%g", scales.length, scales.time)
    return scales


_FACTORIES = {
    UnitKind.GEO: geo_scales,
    UnitKind.SI: si_scales,
    UnitKind.NONE: dimensionless_scales,
}


def scales_for(kind, **kwargs) -> CharacteristicScales:
    """Build characteristic scales of the given kind (``UnitKind`` or its name)."""
    if isinstance(kind, str):
        kind = UnitKind(kind.upper())
    return _FACTORIES[kind](**kwargs)
