"""pyjclass - Java class file reader with constant pool validation."""

from .access import ClassAccessFlags, FieldAccessFlags, MethodAccessFlags
from .classfile import Attribute, ClassFile, Field, JavaVersion, Method
from .classreader import ClassReader, parse_class, read_class_file
from .constants import ConstantPool, ConstantPoolTag, ReferenceKind
from .errors import *
from .validation import (
    ValidatedConstantPool,
    ValidationFailure,
    validate_constant_pool,
    verify_bootstrap_methods,
)

__version__ = "0.1.0"
__all__ = [
    "ClassReader",
    "ClassFile",
    "parse_class",
    "read_class_file",
    "validate_constant_pool",
    "verify_bootstrap_methods",
]
