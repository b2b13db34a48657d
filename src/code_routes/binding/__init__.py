"""Parameter binding for Code Routes.

Public exports:
    - ``ParameterBinder``: base class for binders
    - ``NumberFormat`` / ``INVARIANT``: format provider for numeric binders
    - ``BinderRegistry`` / ``DEFAULT_BINDERS``: type to binder lookup
"""

from ._base_binder import INVARIANT, NumberFormat, ParameterBinder
from .binders import (
    BooleanBinder,
    CanonicalBinder,
    DateBinder,
    DecimalBinder,
    EnumBinder,
    FloatBinder,
    Int8Binder,
    Int16Binder,
    Int32Binder,
    Int64Binder,
    IntegerBinder,
    StringBinder,
    TypeAdapterBinder,
    UInt8Binder,
    UInt16Binder,
    UInt32Binder,
    UInt64Binder,
    UUIDBinder,
)
from .registry import DEFAULT_BINDERS, BinderRegistry

__all__ = [
    "BinderRegistry",
    "BooleanBinder",
    "CanonicalBinder",
    "DEFAULT_BINDERS",
    "DateBinder",
    "DecimalBinder",
    "EnumBinder",
    "FloatBinder",
    "INVARIANT",
    "Int8Binder",
    "Int16Binder",
    "Int32Binder",
    "Int64Binder",
    "IntegerBinder",
    "NumberFormat",
    "ParameterBinder",
    "StringBinder",
    "TypeAdapterBinder",
    "UInt8Binder",
    "UInt16Binder",
    "UInt32Binder",
    "UInt64Binder",
    "UUIDBinder",
]
