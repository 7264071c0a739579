"""
Java class file reader.
Reads the class file layout front to back and validates the constant pool
before anything is resolved through it.
"""

import io
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .access import (
    ClassAccessFlags,
    FieldAccessFlags,
    MethodAccessFlags,
    decode_access_flags,
)
from .classfile import MAGIC, Attribute, ClassFile, Field, JavaVersion, Method
from .constants import read_constant_pool
from .errors import ClassReadError, InvalidMagicNumber
from .reader import ByteReader
from .validation import ValidatedConstantPool, validate_constant_pool


class ClassReader:
    """Reads one class file from a binary stream."""

    def __init__(self, stream: BinaryIO):
        self.reader = ByteReader(stream)
        self.constant_pool: Optional[ValidatedConstantPool] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "ClassReader":
        return cls(io.BytesIO(data))

    def _read_pool_index(self) -> int:
        return self.reader.read_u2() - 1

    def _read_attributes(self) -> tuple[Attribute, ...]:
        """Read an attribute table; payloads are kept unparsed."""
        count = self.reader.read_u2()
        attrs = []
        for _ in range(count):
            name_idx = self._read_pool_index()
            length = self.reader.read_u4()
            attrs.append(Attribute(name_idx, self.reader.read_bytes(length)))
        return tuple(attrs)

    def _read_field(self) -> Field:
        access = decode_access_flags(FieldAccessFlags, self.reader.read_u2(), "field")
        name_idx = self._read_pool_index()
        desc_idx = self._read_pool_index()
        attrs = self._read_attributes()
        return Field(access, name_idx, desc_idx, attrs)

    def _read_method(self) -> Method:
        access = decode_access_flags(MethodAccessFlags, self.reader.read_u2(), "method")
        name_idx = self._read_pool_index()
        desc_idx = self._read_pool_index()
        attrs = self._read_attributes()
        return Method(access, name_idx, desc_idx, attrs)

    def _read_interfaces(self) -> tuple[str, ...]:
        count = self.reader.read_u2()
        return tuple(
            self.constant_pool.class_name(self._read_pool_index())
            for _ in range(count)
        )

    def read(self) -> ClassFile:
        """Read the class file and return ClassFile."""
        # Magic number
        magic = self.reader.read_u4()
        if magic != MAGIC:
            raise InvalidMagicNumber(magic)

        # Version
        minor = self.reader.read_u2()
        major = self.reader.read_u2()

        # Constant pool
        self.constant_pool = validate_constant_pool(read_constant_pool(self.reader))

        # Access flags
        access_flags = decode_access_flags(ClassAccessFlags, self.reader.read_u2(), "class")

        # This/super class; super_class is 0 only for java/lang/Object
        this_class = self._read_pool_index()
        super_class = self._read_pool_index()
        self.constant_pool.class_name(this_class)
        if super_class < 0:
            super_class = None
        else:
            self.constant_pool.class_name(super_class)

        interfaces = self._read_interfaces()

        # Fields
        fields_count = self.reader.read_u2()
        fields = tuple(self._read_field() for _ in range(fields_count))

        # Methods
        methods_count = self.reader.read_u2()
        methods = tuple(self._read_method() for _ in range(methods_count))

        # Class attributes
        attrs = self._read_attributes()

        return ClassFile(
            version=JavaVersion(major, minor),
            constant_pool=self.constant_pool,
            access_flags=access_flags,
            this_class=this_class,
            super_class=super_class,
            interfaces=interfaces,
            fields=fields,
            methods=methods,
            attributes=attrs,
        )


def parse_class(source: Union[bytes, bytearray, BinaryIO]) -> ClassFile:
    """Parse a class file from bytes or an open binary stream."""
    if isinstance(source, (bytes, bytearray)):
        return ClassReader.from_bytes(bytes(source)).read()
    return ClassReader(source).read()


def read_class_file(path: Union[str, Path]) -> ClassFile:
    """Read a single class file."""
    try:
        f = open(path, "rb")
    except OSError as e:
        raise ClassReadError(f"couldn't read the class file: {e}") from e
    with f:
        return ClassReader(f).read()
