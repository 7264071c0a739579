"""
Immutable model of a parsed Java class file.
All nodes are frozen dataclasses; constant pool indices are 0-based.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .access import ClassAccessFlags, FieldAccessFlags, MethodAccessFlags
from .node import Node
from .validation import ValidatedConstantPool


MAGIC = 0xCAFEBABE


@dataclass(frozen=True)
class JavaVersion(Node):
    """Class file format version (major.minor)."""
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class Attribute(Node):
    """An attribute whose payload is kept as raw bytes."""
    name_index: int
    info: bytes


@dataclass(frozen=True)
class Field(Node):
    access_flags: FieldAccessFlags
    name_index: int
    descriptor_index: int
    attributes: tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class Method(Node):
    access_flags: MethodAccessFlags
    name_index: int
    descriptor_index: int
    attributes: tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class ClassFile(Node):
    """A fully read and validated class file."""
    version: JavaVersion
    constant_pool: ValidatedConstantPool
    access_flags: ClassAccessFlags
    this_class: int
    super_class: Optional[int]
    interfaces: tuple[str, ...]
    fields: tuple[Field, ...]
    methods: tuple[Method, ...]
    attributes: tuple[Attribute, ...]

    @property
    def name(self) -> str:
        """Internal name of this class, e.g. 'java/lang/String'."""
        return self.constant_pool.class_name(self.this_class)

    @property
    def super_name(self) -> Optional[str]:
        if self.super_class is None:
            return None
        return self.constant_pool.class_name(self.super_class)

    def member_name(self, member: Union[Field, Method]) -> str:
        return self.constant_pool.utf8(member.name_index)

    def descriptor(self, member: Union[Field, Method]) -> str:
        return self.constant_pool.utf8(member.descriptor_index)

    def attribute_name(self, attribute: Attribute) -> str:
        return self.constant_pool.utf8(attribute.name_index)

    def find_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if self.member_name(f) == name:
                return f
        return None

    def find_methods(self, name: str) -> tuple[Method, ...]:
        """All methods called name (overloads differ by descriptor)."""
        return tuple(m for m in self.methods if self.member_name(m) == name)
