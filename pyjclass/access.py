"""
Access flag vocabularies for classes, fields and methods.
"""

from enum import IntFlag
from typing import Type, TypeVar

from .errors import InvalidAccessFlags


class ClassAccessFlags(IntFlag):
    PUBLIC = 0x0001
    FINAL = 0x0010
    SUPER = 0x0020  # invokespecial semantics
    INTERFACE = 0x0200
    ABSTRACT = 0x0400
    SYNTHETIC = 0x1000
    ANNOTATION = 0x2000
    ENUM = 0x4000
    MODULE = 0x8000


class FieldAccessFlags(IntFlag):
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    VOLATILE = 0x0040
    TRANSIENT = 0x0080
    SYNTHETIC = 0x1000
    ENUM = 0x4000


class MethodAccessFlags(IntFlag):
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SYNCHRONIZED = 0x0020
    BRIDGE = 0x0040
    VARARGS = 0x0080
    NATIVE = 0x0100
    ABSTRACT = 0x0400
    STRICT = 0x0800
    SYNTHETIC = 0x1000


F = TypeVar("F", bound=IntFlag)


def decode_access_flags(flag_type: Type[F], bits: int, owner: str) -> F:
    """Decode bits into flag_type, rejecting any bit it does not define."""
    known = 0
    for member in flag_type:
        known |= member.value
    unknown = bits & ~known
    if unknown:
        raise InvalidAccessFlags(owner, bits, unknown)
    return flag_type(bits)
