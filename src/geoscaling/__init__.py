"""
geoscaling: non-dimensionalisation of geodynamic material parameters.

Characteristic scales are chosen once per model; every physical quantity,
material law and phase record can then be moved to non-dimensional space and
back again.

>>> import geoscaling as gs
>>> scales = gs.geo_scales(viscosity=1e19 * gs.units.Pas, length=1000 * gs.units.km)
>>> gs.non_dimensionalise(10 * gs.units.ureg("cm/yr"), scales)
0.0031688087814028945
"""

from ._version import __version__

from . import units
from .units import ureg, quantity
from .units import (
    UnitsError,
    DimensionalityError,
    UnitMismatchError,
    ShapeMismatchError,
    ScalingStateError,
)
from .units import BaseDimension, dimension_signature, to_canonical, convert, has_units

from ._rcparams import rcParams, rc_context, reset_rcparams

from .scaled_quantity import (
    ScaledQuantity,
    value_of,
    numeric_value_of,
    unit_of,
    add,
    subtract,
    multiply,
    divide,
)

from . import scaling
from .scaling import (
    UnitKind,
    CharacteristicScales,
    geo_scales,
    si_scales,
    dimensionless_scales,
    scales_for,
    characteristic_factor,
    non_dimensionalise,
    non_dimensionalise_inplace,
    dimensionalise,
    dimensionalise_inplace,
    is_dimensional,
    ndargs,
)

from . import materials
from .materials import (
    MaterialVisitor,
    MaterialParam,
    MaterialParams,
    set_material_params,
    PhaseDiagramTable,
    ConstantDensity,
    PT_Density,
    compute_density,
    compute_density_inplace,
    compute_density_phases,
    ConstantConductivity,
    T_Conductivity_Whittacker,
    TP_Conductivity,
    TP_CONDUCTIVITY_PRESETS,
    set_tp_conductivity,
    compute_conductivity,
    compute_conductivity_inplace,
    compute_conductivity_phases,
    MeltingParam_Caricchi,
    compute_melting_param,
    compute_melting_param_inplace,
    compute_melting_param_phases,
)
