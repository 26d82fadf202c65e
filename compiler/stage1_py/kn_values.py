#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from kn_internal_error import InternalCompilerError

# ========================================
# The scalar value model for Kiln.
# ========================================

INT_BITS = 32
PTR_BITS = 64

INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


class ValueType(Enum):
    INT = "int"
    FLOAT = "float"
    STR = "str"
    CHAR = "char"
    PTR = "ptr"
    BOOL = "bool"

    @property
    def type_name(self) -> str:
        return self.value


# Type annotations as they are written in source
TYPE_NAMES: Dict[str, ValueType] = {t.type_name: t for t in ValueType}


def lookup_type(name: str) -> Optional[ValueType]:
    return TYPE_NAMES.get(name)


Payload = Union[int, float, str, bool]


def wrap_int(value: int) -> int:
    """Wrap to a signed 32-bit integer (two's complement)."""
    value &= (1 << INT_BITS) - 1
    if value >= 1 << (INT_BITS - 1):
        value -= 1 << INT_BITS
    return value


def wrap_ptr(value: int) -> int:
    """Wrap to an unsigned 64-bit address."""
    return value & ((1 << PTR_BITS) - 1)


@dataclass(frozen=True)
class Value:
    type: ValueType
    payload: Payload

    # --- constructors ---

    @classmethod
    def of_int(cls, value: int) -> "Value":
        return cls(ValueType.INT, wrap_int(value))

    @classmethod
    def of_float(cls, value: float) -> "Value":
        return cls(ValueType.FLOAT, float(value))

    @classmethod
    def of_ptr(cls, address: int) -> "Value":
        return cls(ValueType.PTR, wrap_ptr(address))

    @classmethod
    def of_char(cls, ch: str) -> "Value":
        if len(ch) != 1:
            raise InternalCompilerError(f"[ICE-0101] char value needs exactly one character, got {ch!r}")
        return cls(ValueType.CHAR, ch)

    @classmethod
    def of_str(cls, text: str) -> "Value":
        return cls(ValueType.STR, text)

    @classmethod
    def of_bool(cls, flag: bool) -> "Value":
        return cls(ValueType.BOOL, bool(flag))

    # --- display ---

    def format(self, with_type: bool = False) -> str:
        if self.type is ValueType.INT:
            res = f"{self.payload}"
        elif self.type is ValueType.FLOAT:
            res = f"{self.payload:.2f}f"
        elif self.type is ValueType.STR:
            res = f'"{self.payload}"'
        elif self.type is ValueType.CHAR:
            res = f"{self.payload}"
        elif self.type is ValueType.PTR:
            res = f"{self.payload:x}"
        elif self.type is ValueType.BOOL:
            res = "true" if self.payload else "false"
        else:
            raise InternalCompilerError(f"[ICE-0100] unknown value type {self.type!r}")

        if with_type:
            res += f"({self.type.type_name})"
        return res

    def __str__(self) -> str:
        return self.format()
