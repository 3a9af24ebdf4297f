"""
The scaling module provides characteristic scales and the conversions between
dimensional and non-dimensional values.
"""

from ._scales import UnitKind
from ._scales import CharacteristicScales
from ._scales import geo_scales
from ._scales import si_scales
from ._scales import dimensionless_scales
from ._scales import scales_for

from ._scaling import characteristic_factor
from ._scaling import non_dimensionalise
from ._scaling import non_dimensionalise_inplace
from ._scaling import dimensionalise
from ._scaling import dimensionalise_inplace
from ._scaling import is_dimensional
from ._scaling import ndargs
