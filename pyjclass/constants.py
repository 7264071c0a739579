"""
Constant pool model and decoder.

Every index stored in a constant is 0-based: the value in the file is
1-based and is adjusted once, when the entry is decoded. A raw index of 0
becomes -1 and is rejected by validation.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, ClassVar, Iterator, Optional, Sequence, Type, TypeVar, Union

from .errors import (
    ClassReadError,
    ConstantPoolIndexError,
    ConstantPoolTypeError,
    InvalidMethodHandleReferenceKind,
    InvalidUtf8Constant,
    UnrecognizedConstantTag,
)
from .node import Node
from .reader import ByteReader


class ConstantPoolTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    INVOKE_DYNAMIC = 18


class ReferenceKind(IntEnum):
    GET_FIELD = 1
    GET_STATIC = 2
    PUT_FIELD = 3
    PUT_STATIC = 4
    INVOKE_VIRTUAL = 5
    INVOKE_STATIC = 6
    INVOKE_SPECIAL = 7
    NEW_INVOKE_SPECIAL = 8
    INVOKE_INTERFACE = 9


class Constant(Node):
    """Base class for constant pool entries."""
    tag: ClassVar[Optional[ConstantPoolTag]] = None


@dataclass(frozen=True)
class Utf8Constant(Constant):
    """CONSTANT_Utf8: decoded text."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.UTF8
    value: str


@dataclass(frozen=True)
class IntegerConstant(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INTEGER
    value: int


@dataclass(frozen=True)
class FloatConstant(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.FLOAT
    value: float


@dataclass(frozen=True)
class LongConstant(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.LONG
    value: int


@dataclass(frozen=True)
class DoubleConstant(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.DOUBLE
    value: float


@dataclass(frozen=True)
class ClassConstant(Constant):
    """CONSTANT_Class: name_index points at the internal class name."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.CLASS
    name_index: int


@dataclass(frozen=True)
class StringConstant(Constant):
    """CONSTANT_String: string_index points at the literal's text."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.STRING
    string_index: int


@dataclass(frozen=True)
class FieldConstant(Constant):
    """CONSTANT_Fieldref."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.FIELDREF
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class MethodConstant(Constant):
    """CONSTANT_Methodref."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHODREF
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class InterfaceMethodConstant(Constant):
    """CONSTANT_InterfaceMethodref."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INTERFACE_METHODREF
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class NameAndTypeConstant(Constant):
    """CONSTANT_NameAndType: a member name plus its field or method descriptor."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.NAME_AND_TYPE
    name_index: int
    descriptor_index: int


@dataclass(frozen=True)
class MethodHandleConstant(Constant):
    """CONSTANT_MethodHandle.

    reference_kind decides what reference_index must point at: a Fieldref for
    the get/put kinds, a Methodref for invokeVirtual, invokeStatic,
    invokeSpecial and newInvokeSpecial (the latter only for a method named
    <init>), and an InterfaceMethodref for invokeInterface.
    """
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHOD_HANDLE
    reference_kind: ReferenceKind
    reference_index: int


@dataclass(frozen=True)
class MethodTypeConstant(Constant):
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHOD_TYPE
    descriptor_index: int


@dataclass(frozen=True)
class InvokeDynamicConstant(Constant):
    """CONSTANT_InvokeDynamic.

    bootstrap_method_attr_index addresses the BootstrapMethods attribute, not
    the constant pool, so it is kept exactly as read.
    """
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INVOKE_DYNAMIC
    bootstrap_method_attr_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class UnusableSlot(Constant):
    """Placeholder for the slot following a Long or Double constant."""
    pass


C = TypeVar("C", bound=Constant)


class ConstantPool(Node):
    """Fixed-length, 0-based sequence of constants.

    Lookups are always bounds-checked: negative positions are errors, not
    offsets from the end.
    """

    def __init__(self, entries: Sequence[Constant]):
        self.entries: tuple[Constant, ...] = tuple(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Constant]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> Constant:
        if not 0 <= index < len(self.entries):
            raise ConstantPoolIndexError(
                f"constant pool index {index} out of range (pool has {len(self.entries)} entries)"
            )
        return self.entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, ConstantPool):
            return NotImplemented
        return self.entries == other.entries

    def __hash__(self) -> int:
        return hash(self.entries)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self.entries)!r})"

    def contains(self, index: int) -> bool:
        return 0 <= index < len(self.entries)

    def get(self, index: int, expected: Union[Type[C], tuple[Type[Constant], ...]]) -> C:
        """Return the constant at index, checking that it is an `expected`."""
        entry = self[index]
        if not isinstance(entry, expected):
            if isinstance(expected, tuple):
                wanted = " or ".join(t.__name__ for t in expected)
            else:
                wanted = expected.__name__
            raise ConstantPoolTypeError(
                f"expected {wanted} at #{index}, got {type(entry).__name__}"
            )
        return entry

    def utf8(self, index: int) -> str:
        """Text of the Utf8 constant at index."""
        return self.get(index, Utf8Constant).value

    def class_name(self, index: int) -> str:
        """Internal name of the class constant at index."""
        return self.utf8(self.get(index, ClassConstant).name_index)

    def member_name(self, index: int) -> str:
        """Name of the field, method or interface method constant at index."""
        entry = self.get(index, (FieldConstant, MethodConstant, InterfaceMethodConstant))
        return self.utf8(self.get(entry.name_and_type_index, NameAndTypeConstant).name_index)


def _read_index(reader: ByteReader) -> int:
    return reader.read_u2() - 1


def _read_utf8(reader: ByteReader) -> Utf8Constant:
    length = reader.read_u2()
    data = reader.read_bytes(length)
    try:
        value = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Constant(f"invalid utf8 string on constant pool: {e}") from e
    return Utf8Constant(value)


def _read_integer(reader: ByteReader) -> IntegerConstant:
    return IntegerConstant(reader.read_i4())


def _read_float(reader: ByteReader) -> FloatConstant:
    return FloatConstant(reader.read_f4())


def _read_wide_bits(reader: ByteReader) -> int:
    high = reader.read_u4()
    low = reader.read_u4()
    return (high << 32) | low


def _read_long(reader: ByteReader) -> LongConstant:
    return LongConstant(struct.unpack(">q", struct.pack(">Q", _read_wide_bits(reader)))[0])


def _read_double(reader: ByteReader) -> DoubleConstant:
    return DoubleConstant(struct.unpack(">d", struct.pack(">Q", _read_wide_bits(reader)))[0])


def _read_class(reader: ByteReader) -> ClassConstant:
    return ClassConstant(_read_index(reader))


def _read_string(reader: ByteReader) -> StringConstant:
    return StringConstant(_read_index(reader))


def _read_fieldref(reader: ByteReader) -> FieldConstant:
    class_idx = _read_index(reader)
    nat_idx = _read_index(reader)
    return FieldConstant(class_idx, nat_idx)


def _read_methodref(reader: ByteReader) -> MethodConstant:
    class_idx = _read_index(reader)
    nat_idx = _read_index(reader)
    return MethodConstant(class_idx, nat_idx)


def _read_interface_methodref(reader: ByteReader) -> InterfaceMethodConstant:
    class_idx = _read_index(reader)
    nat_idx = _read_index(reader)
    return InterfaceMethodConstant(class_idx, nat_idx)


def _read_name_and_type(reader: ByteReader) -> NameAndTypeConstant:
    name_idx = _read_index(reader)
    desc_idx = _read_index(reader)
    return NameAndTypeConstant(name_idx, desc_idx)


def _read_method_handle(reader: ByteReader) -> MethodHandleConstant:
    kind = reader.read_u1()
    try:
        reference_kind = ReferenceKind(kind)
    except ValueError:
        raise InvalidMethodHandleReferenceKind(kind) from None
    return MethodHandleConstant(reference_kind, _read_index(reader))


def _read_method_type(reader: ByteReader) -> MethodTypeConstant:
    return MethodTypeConstant(_read_index(reader))


def _read_invoke_dynamic(reader: ByteReader) -> InvokeDynamicConstant:
    bootstrap_idx = reader.read_u2()
    nat_idx = _read_index(reader)
    return InvokeDynamicConstant(bootstrap_idx, nat_idx)


_DECODERS: dict[ConstantPoolTag, Callable[[ByteReader], Constant]] = {
    ConstantPoolTag.UTF8: _read_utf8,
    ConstantPoolTag.INTEGER: _read_integer,
    ConstantPoolTag.FLOAT: _read_float,
    ConstantPoolTag.LONG: _read_long,
    ConstantPoolTag.DOUBLE: _read_double,
    ConstantPoolTag.CLASS: _read_class,
    ConstantPoolTag.STRING: _read_string,
    ConstantPoolTag.FIELDREF: _read_fieldref,
    ConstantPoolTag.METHODREF: _read_methodref,
    ConstantPoolTag.INTERFACE_METHODREF: _read_interface_methodref,
    ConstantPoolTag.NAME_AND_TYPE: _read_name_and_type,
    ConstantPoolTag.METHOD_HANDLE: _read_method_handle,
    ConstantPoolTag.METHOD_TYPE: _read_method_type,
    ConstantPoolTag.INVOKE_DYNAMIC: _read_invoke_dynamic,
}


def read_constant(reader: ByteReader) -> Constant:
    """Read one tagged constant pool entry."""
    offset = reader.offset
    tag = reader.read_u1()
    decoder = _DECODERS.get(tag)
    if decoder is None:
        raise UnrecognizedConstantTag(tag, offset)
    return decoder(reader)


def read_constant_pool(reader: ByteReader) -> ConstantPool:
    """Read constant_pool_count and the count - 1 slots that follow it."""
    count = reader.read_u2()
    size = max(count - 1, 0)
    entries: list[Constant] = []
    while len(entries) < size:
        offset = reader.offset
        entry = read_constant(reader)
        entries.append(entry)
        # Long and Double take two slots
        if isinstance(entry, (LongConstant, DoubleConstant)):
            if len(entries) == size:
                raise ClassReadError(
                    f"{type(entry).__name__} at offset {offset} needs two constant pool "
                    f"slots but only one is left (constant_pool_count {count})"
                )
            entries.append(UnusableSlot())
    return ConstantPool(entries)
