"""
Material parameter records and the laws built on them.

Records declare their scalable fields, so that the functions of
``geoscaling.scaling`` can (non-)dimensionalise a whole phase at once.
"""

from ._base import FieldKind
from ._base import MaterialVisitor
from ._base import ScalableRecord
from ._base import MaterialParam
from ._base import MaterialParams
from ._base import set_material_params
from ._base import quantity_field, record_field, table_field
from ._base import is_table

from .phase_diagrams import PhaseDiagramTable

from .density import ConstantDensity
from .density import PT_Density
from .density import compute_density
from .density import compute_density_inplace
from .density import compute_density_phases

from .conductivity import ConstantConductivity
from .conductivity import T_Conductivity_Whittacker
from .conductivity import TP_Conductivity
from .conductivity import TP_CONDUCTIVITY_PRESETS
from .conductivity import set_tp_conductivity
from .conductivity import compute_conductivity
from .conductivity import compute_conductivity_inplace
from .conductivity import compute_conductivity_phases

from .melting import MeltingParam_Caricchi
from .melting import compute_melting_param
from .melting import compute_melting_param_inplace
from .melting import compute_melting_param_phases
