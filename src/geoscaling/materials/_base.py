"""
Material parameter records.

A record is a dataclass whose scalable fields are declared when the record
type is defined, with one of three field kinds:

- QUANTITY: a ScaledQuantity owned by the record
- RECORD: a tuple of nested records (and, possibly, lookup tables)
- TABLE: a single phase-diagram lookup table

``accept(visitor)`` walks those fields, so the scaling code never has to
inspect arbitrary attributes. New record kinds only need to declare their
fields with :func:`quantity_field`, :func:`record_field` or
:func:`table_field`.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional, Tuple

import sympy

from ..scaled_quantity import ScaledQuantity


class FieldKind(Enum):
    QUANTITY = "quantity"
    RECORD = "record"
    TABLE = "table"


def quantity_field(value, unit: Optional[str] = None):
    """A ScaledQuantity field, with its default given as a value (and unit)."""

    def factory():
        return ScaledQuantity(value, unit)

    return field(default_factory=factory, metadata={"kind": FieldKind.QUANTITY})


def record_field():
    """A tuple of nested records; empty by default."""
    return field(default=(), metadata={"kind": FieldKind.RECORD})


def table_field():
    return field(default=None, metadata={"kind": FieldKind.TABLE})


class MaterialVisitor:
    """
    Visitor over the scalable fields of a record.

    The default implementation recurses into nested records and ignores
    everything else; subclasses override what they need.
    """

    def visit_quantity(self, owner, name: str, quantity: ScaledQuantity):
        pass

    def visit_record(self, owner, name: str, record: "ScalableRecord"):
        record.accept(self)

    def visit_table(self, owner, name: str, index: Optional[int], table):
        pass


def is_table(obj) -> bool:
    """True for phase-diagram lookup tables (anything that can be rebuilt under new scales)."""
    return getattr(obj, "is_phase_diagram", False)


@dataclass
class ScalableRecord:
    """
    Base of every record that can be (non-)dimensionalised.

    ``nondimensional`` records the current state and is maintained by the
    scaling functions; it guards against scaling twice.
    """

    nondimensional: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self):
        # quantities and numbers given to the constructor are wrapped
        for name, kind in self.field_kinds():
            value = getattr(self, name)
            if kind is FieldKind.QUANTITY and not isinstance(value, ScaledQuantity):
                setattr(self, name, ScaledQuantity(value))
            elif kind is FieldKind.RECORD:
                setattr(self, name, _as_tuple(value))

    @classmethod
    def field_kinds(cls) -> Tuple[Tuple[str, FieldKind], ...]:
        return tuple(
            (f.name, f.metadata["kind"]) for f in fields(cls) if "kind" in f.metadata
        )

    def accept(self, visitor: MaterialVisitor):
        for name, kind in self.field_kinds():
            value = getattr(self, name)
            if value is None:
                continue
            if kind is FieldKind.QUANTITY:
                visitor.visit_quantity(self, name, value)
            elif kind is FieldKind.TABLE:
                visitor.visit_table(self, name, None, value)
            else:
                for index, item in enumerate(value):
                    if is_table(item):
                        visitor.visit_table(self, name, index, item)
                    elif isinstance(item, ScalableRecord):
                        visitor.visit_record(self, name, item)

    def replace_table(self, name: str, index: Optional[int], table):
        """Swap a lookup table for a rebuilt one."""
        if index is None:
            setattr(self, name, table)
        else:
            items = list(getattr(self, name))
            items[index] = table
            setattr(self, name, tuple(items))


@dataclass
class MaterialParam(ScalableRecord):
    """
    A single material law (density, conductivity, ...).

    Subclasses define ``equation`` as a SymPy relation describing the law.
    """

    equation = None

    def latex(self) -> str:
        """The governing equation, typeset."""
        if self.equation is None:
            return ""
        return sympy.latex(self.equation)


@dataclass
class MaterialParams(ScalableRecord):
    """
    All material laws of one phase.

    Each law slot is a tuple, since a phase can combine several laws of one
    kind; an entry can also be a phase-diagram lookup table.
    """

    name: str = ""
    phase: int = 1
    density: Tuple[Any, ...] = record_field()
    conductivity: Tuple[Any, ...] = record_field()
    melting: Tuple[Any, ...] = record_field()


def _as_tuple(value):
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def set_material_params(name="", phase=1, density=None, conductivity=None, melting=None, char_dim=None):
    """
    Define the material parameters of one phase.

    Parameters
    ----------
    name : str
        Description of the phase.
    phase : int
        Phase id, as used in the ``phases`` arrays of the compute routines.
    density, conductivity, melting
        A material law (or lookup table), or a sequence of them.
    char_dim : CharacteristicScales, optional
        If given, the record is non-dimensionalised straight away.

    Example
    -------
    >>> params = set_material_params(name="Mantle", phase=1, density=ConstantDensity())
    """
    params = MaterialParams(
        name=name,
        phase=phase,
        density=_as_tuple(density),
        conductivity=_as_tuple(conductivity),
        melting=_as_tuple(melting),
    )
    if char_dim is not None:
        from ..scaling import non_dimensionalise_inplace

        non_dimensionalise_inplace(params, char_dim)
    return params
