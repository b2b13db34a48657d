"""Built-in parameter binders.

Integer binders parse only the canonical spelling of a value: no positive
sign, no leading zero except for ``"0"`` itself, no ``"-0"``, and the
negative sign only as first character. ``/01`` or ``/+5`` therefore never
match, so each resource has exactly one URL.

Float and Decimal binders format in positional notation (``1e+20`` is
written ``100000000000000000000``). Their constraint, like the signed
integer one, follows the negative sign and decimal separator of the
:class:`NumberFormat` in use (see ``constraint_for``).

Types without a dedicated binder go through :class:`TypeAdapterBinder`,
which delegates parsing to pydantic.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from ._base_binder import INVARIANT, NumberFormat, ParameterBinder

__all__ = [
    "BooleanBinder",
    "CanonicalBinder",
    "DateBinder",
    "DecimalBinder",
    "EnumBinder",
    "FloatBinder",
    "Int8Binder",
    "Int16Binder",
    "Int32Binder",
    "Int64Binder",
    "IntegerBinder",
    "StringBinder",
    "TypeAdapterBinder",
    "UInt8Binder",
    "UInt16Binder",
    "UInt32Binder",
    "UInt64Binder",
    "UUIDBinder",
    "builtin_binders",
]


class StringBinder(ParameterBinder):
    """Accepts any non-empty segment as is."""

    __slots__ = ()

    parameter_type = str
    binder_code = "str"

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        if not value:
            return None, False
        return value, True


class BooleanBinder(ParameterBinder):
    """Binds ``true`` and ``false``, lowercase only."""

    __slots__ = ()

    parameter_type = bool
    binder_code = "bool"
    constraint = "true|false"

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        if value == "true":
            return True, True
        if value == "false":
            return False, True
        return None, False

    def format(self, value: Any, provider: NumberFormat | None = None) -> str:
        return "true" if value else "false"


class IntegerBinder(ParameterBinder):
    """Canonical integer binder.

    ``min_value``/``max_value`` restrict the accepted range (None means
    unbounded); ``signed`` controls whether a negative sign is allowed.
    """

    __slots__ = ()

    parameter_type = int
    binder_code = "int"
    signed = True
    min_value: int | None = None
    max_value: int | None = None
    constraint = "0|-?[1-9][0-9]*"

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        if not value or value.isspace():
            return None, False
        provider = provider or INVARIANT
        if provider.positive_sign and value.startswith(provider.positive_sign):
            return None, False
        negative = False
        digits = value
        if self.signed and value.startswith(provider.negative_sign):
            negative = True
            digits = value[len(provider.negative_sign) :]
        if not digits or not (digits.isascii() and digits.isdigit()):
            return None, False

        # disallow leading zero, and "-0"
        if digits[0] == "0" and (len(digits) != 1 or negative):
            return None, False

        try:
            result = int(digits)
        except ValueError:  # more digits than int() accepts
            return None, False
        if negative:
            result = -result
        if self.min_value is not None and result < self.min_value:
            return None, False
        if self.max_value is not None and result > self.max_value:
            return None, False
        return result, True

    def constraint_for(self, provider: NumberFormat | None = None) -> str:
        provider = provider or INVARIANT
        if not self.signed or provider.negative_sign == INVARIANT.negative_sign:
            return self.constraint
        return f"0|{re.escape(provider.negative_sign)}?[1-9][0-9]*"

    def format(self, value: Any, provider: NumberFormat | None = None) -> str:
        provider = provider or INVARIANT
        number = int(value)
        if number < 0:
            return f"{provider.negative_sign}{-number}"
        return str(number)


class _UnsignedBinder(IntegerBinder):
    __slots__ = ()

    signed = False
    min_value = 0
    constraint = "0|[1-9][0-9]*"


class Int8Binder(IntegerBinder):
    __slots__ = ()
    binder_code = "int8"
    min_value, max_value = -(2**7), 2**7 - 1


class Int16Binder(IntegerBinder):
    __slots__ = ()
    binder_code = "int16"
    min_value, max_value = -(2**15), 2**15 - 1


class Int32Binder(IntegerBinder):
    __slots__ = ()
    binder_code = "int32"
    min_value, max_value = -(2**31), 2**31 - 1


class Int64Binder(IntegerBinder):
    __slots__ = ()
    binder_code = "int64"
    min_value, max_value = -(2**63), 2**63 - 1


class UInt8Binder(_UnsignedBinder):
    __slots__ = ()
    binder_code = "uint8"
    max_value = 2**8 - 1


class UInt16Binder(_UnsignedBinder):
    __slots__ = ()
    binder_code = "uint16"
    max_value = 2**16 - 1


class UInt32Binder(_UnsignedBinder):
    __slots__ = ()
    binder_code = "uint32"
    max_value = 2**32 - 1


class UInt64Binder(_UnsignedBinder):
    __slots__ = ()
    binder_code = "uint64"
    max_value = 2**64 - 1


class TypeAdapterBinder(ParameterBinder):
    """Binds any type pydantic can validate from a string.

    Raises pydantic's schema generation error at construction when the type
    is not supported, which the registry reports as a missing binder.
    """

    __slots__ = ("parameter_type", "_adapter")

    def __init__(self, parameter_type: Any) -> None:
        self.parameter_type = parameter_type
        self._adapter = TypeAdapter(parameter_type)

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        if not value:
            return None, False
        try:
            return self._adapter.validate_strings(value), True
        except ValidationError:
            return None, False

    def json_schema(self) -> dict[str, Any]:
        return self._adapter.json_schema()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({getattr(self.parameter_type, '__name__', self.parameter_type)})"


class CanonicalBinder(TypeAdapterBinder):
    """TypeAdapterBinder that only accepts the canonical spelling.

    ``try_bind(text)`` succeeds iff ``format(parsed) == text``.
    """

    __slots__ = ()

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        result, ok = super().try_bind(value, provider)
        if not ok or self.format(result, provider) != value:
            return None, False
        return result, True


class _DecimalTextMixin:
    """Reads and writes positional decimals in the provider's format."""

    __slots__ = ()

    def constraint_for(self, provider: NumberFormat | None = None) -> str:
        provider = provider or INVARIANT
        sign = re.escape(provider.negative_sign)
        separator = re.escape(provider.decimal_separator)
        return f"{sign}?[0-9]+(?:{separator}[0-9]+)?"

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        provider = provider or INVARIANT
        if not value or re.fullmatch(self.constraint_for(provider), value) is None:
            return None, False
        if value.startswith(provider.negative_sign):
            value = "-" + value[len(provider.negative_sign) :]
        value = value.replace(provider.decimal_separator, ".")
        return super().try_bind(value, provider)  # type: ignore[misc]

    def format(self, value: Any, provider: NumberFormat | None = None) -> str:
        provider = provider or INVARIANT
        number = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
        if not number.is_finite():
            raise ValueError(f"Cannot put {value!r} in a route")
        text = f"{number:f}".replace(".", provider.decimal_separator)
        if text.startswith("-"):
            text = provider.negative_sign + text[1:]
        return text


class FloatBinder(_DecimalTextMixin, TypeAdapterBinder):
    __slots__ = ()

    binder_code = "float"
    constraint = r"-?[0-9]+(?:\.[0-9]+)?"

    def __init__(self) -> None:
        super().__init__(float)


class DecimalBinder(_DecimalTextMixin, TypeAdapterBinder):
    __slots__ = ()

    binder_code = "decimal"
    constraint = r"-?[0-9]+(?:\.[0-9]+)?"

    def __init__(self) -> None:
        super().__init__(Decimal)


class UUIDBinder(CanonicalBinder):
    """Lowercase, hyphenated UUIDs."""

    __slots__ = ()

    binder_code = "uuid"
    constraint = "[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"

    def __init__(self) -> None:
        super().__init__(UUID)


class DateBinder(CanonicalBinder):
    """ISO ``YYYY-MM-DD`` dates."""

    __slots__ = ()

    binder_code = "date"
    constraint = "[0-9]{4}-[0-9]{2}-[0-9]{2}"

    def __init__(self) -> None:
        super().__init__(date)

    def format(self, value: Any, provider: NumberFormat | None = None) -> str:
        return value.isoformat()


class EnumBinder(CanonicalBinder):
    """Binds an Enum member from the text of its value."""

    __slots__ = ("_members",)

    def __init__(self, enum_type: type[Enum]) -> None:
        super().__init__(enum_type)
        self._members = {str(member.value): member for member in enum_type}

    @property
    def constraint(self) -> str:  # type: ignore[override]
        return "|".join(re.escape(text) for text in self._members)

    def try_bind(self, value: str, provider: NumberFormat | None = None) -> tuple[Any, bool]:
        member = self._members.get(value)
        if member is None:
            return None, False
        return member, True

    def format(self, value: Any, provider: NumberFormat | None = None) -> str:
        return str(self.parameter_type(value).value)


def builtin_binders() -> dict[Any, ParameterBinder]:
    """Return the default type/code to binder table."""
    table: dict[Any, ParameterBinder] = {}
    for binder in (
        StringBinder(),
        BooleanBinder(),
        IntegerBinder(),
        FloatBinder(),
        DecimalBinder(),
        UUIDBinder(),
        DateBinder(),
    ):
        table[binder.parameter_type] = binder
        table[binder.binder_code] = binder
    for binder_class in (
        Int8Binder,
        Int16Binder,
        Int32Binder,
        Int64Binder,
        UInt8Binder,
        UInt16Binder,
        UInt32Binder,
        UInt64Binder,
    ):
        binder = binder_class()
        table[binder.binder_code] = binder
    return table
