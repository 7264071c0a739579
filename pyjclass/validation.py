"""
Cross-reference validation of a decoded constant pool.

Each entry's index fields must point at entries of a specific kind, and the
referenced entries must be valid themselves. The walk is depth-first with a
visited set, so every entry is checked once and self-referencing input
terminates.
"""

from enum import Enum
from typing import Iterator, Sequence

from .constants import (
    ClassConstant,
    Constant,
    ConstantPool,
    FieldConstant,
    InterfaceMethodConstant,
    InvokeDynamicConstant,
    MethodConstant,
    MethodHandleConstant,
    MethodTypeConstant,
    NameAndTypeConstant,
    ReferenceKind,
    StringConstant,
    Utf8Constant,
)
from .errors import ConstantPoolValidationError


class ValidationFailure(Enum):
    CLASS_NAME = "expected name_index of class to point to a string"
    METHOD_CLASS = "method has invalid class index"
    METHOD_NAME_AND_TYPE = "method has invalid name and type index"
    FIELD_CLASS = "field has invalid class index"
    FIELD_NAME_AND_TYPE = "field has invalid name and type index"
    INTERFACE_METHOD_CLASS = "interface method has invalid class index"
    INTERFACE_METHOD_NAME_AND_TYPE = "interface method has invalid name and type index"
    STRING_VALUE = "string object has invalid utf8 string index"
    NAME_AND_TYPE_NAME = "name and type has invalid name index"
    NAME_AND_TYPE_DESCRIPTOR = "name and type has invalid descriptor index"
    INVOKE_DYNAMIC_NAME_AND_TYPE = "invoke dynamic has invalid name and type index"
    INVOKE_DYNAMIC_BOOTSTRAP_METHOD = "invoke dynamic has invalid bootstrap method index"
    METHOD_TYPE_DESCRIPTOR = "method type has invalid descriptor index"
    METHOD_HANDLE = "invalid method handle"


# entry type -> (index attribute, required referent type, failure), in check order
_RULES: dict[type, tuple[tuple[str, type, ValidationFailure], ...]] = {
    ClassConstant: (
        ("name_index", Utf8Constant, ValidationFailure.CLASS_NAME),
    ),
    FieldConstant: (
        ("class_index", ClassConstant, ValidationFailure.FIELD_CLASS),
        ("name_and_type_index", NameAndTypeConstant, ValidationFailure.FIELD_NAME_AND_TYPE),
    ),
    MethodConstant: (
        ("class_index", ClassConstant, ValidationFailure.METHOD_CLASS),
        ("name_and_type_index", NameAndTypeConstant, ValidationFailure.METHOD_NAME_AND_TYPE),
    ),
    InterfaceMethodConstant: (
        ("class_index", ClassConstant, ValidationFailure.INTERFACE_METHOD_CLASS),
        ("name_and_type_index", NameAndTypeConstant,
         ValidationFailure.INTERFACE_METHOD_NAME_AND_TYPE),
    ),
    StringConstant: (
        ("string_index", Utf8Constant, ValidationFailure.STRING_VALUE),
    ),
    NameAndTypeConstant: (
        ("name_index", Utf8Constant, ValidationFailure.NAME_AND_TYPE_NAME),
        ("descriptor_index", Utf8Constant, ValidationFailure.NAME_AND_TYPE_DESCRIPTOR),
    ),
    MethodTypeConstant: (
        ("descriptor_index", Utf8Constant, ValidationFailure.METHOD_TYPE_DESCRIPTOR),
    ),
    InvokeDynamicConstant: (
        ("name_and_type_index", NameAndTypeConstant,
         ValidationFailure.INVOKE_DYNAMIC_NAME_AND_TYPE),
    ),
}

_HANDLE_TARGETS: dict[ReferenceKind, type] = {
    ReferenceKind.GET_FIELD: FieldConstant,
    ReferenceKind.GET_STATIC: FieldConstant,
    ReferenceKind.PUT_FIELD: FieldConstant,
    ReferenceKind.PUT_STATIC: FieldConstant,
    ReferenceKind.INVOKE_VIRTUAL: MethodConstant,
    ReferenceKind.INVOKE_STATIC: MethodConstant,
    ReferenceKind.INVOKE_SPECIAL: MethodConstant,
    ReferenceKind.NEW_INVOKE_SPECIAL: MethodConstant,
    ReferenceKind.INVOKE_INTERFACE: InterfaceMethodConstant,
}

CONSTRUCTOR_NAME = "<init>"


class ValidatedConstantPool(ConstantPool):
    """A constant pool whose cross-references have all been checked.

    Only produced by validate_constant_pool. unverified_bootstrap_methods
    lists the InvokeDynamic positions whose bootstrap method index has not
    been checked against a BootstrapMethods table.
    """

    def __init__(self, entries: Sequence[Constant], unverified_bootstrap_methods: Sequence[int] = ()):
        super().__init__(entries)
        self.unverified_bootstrap_methods: tuple[int, ...] = tuple(unverified_bootstrap_methods)


def _require(pool: ConstantPool, index: int, target: int, expected: type,
             failure: ValidationFailure):
    if not pool.contains(target) or not isinstance(pool.entries[target], expected):
        raise ConstantPoolValidationError(failure, index, target)


def _relations(pool: ConstantPool, index: int) -> Iterator[int]:
    """Check the entry at index one relation at a time, yielding each referent.

    The caller validates a yielded referent before resuming, so checks that
    need a trusted referent can run after the yield.
    """
    entry = pool.entries[index]
    for attr, expected, failure in _RULES.get(type(entry), ()):
        target = getattr(entry, attr)
        _require(pool, index, target, expected, failure)
        yield target

    if isinstance(entry, MethodHandleConstant):
        target = entry.reference_index
        _require(pool, index, target, _HANDLE_TARGETS[entry.reference_kind],
                 ValidationFailure.METHOD_HANDLE)
        yield target
        if (entry.reference_kind == ReferenceKind.NEW_INVOKE_SPECIAL
                and pool.member_name(target) != CONSTRUCTOR_NAME):
            raise ConstantPoolValidationError(ValidationFailure.METHOD_HANDLE, index, target)


def validate_constant_pool(pool: ConstantPool) -> ValidatedConstantPool:
    """Validate every entry of pool, raising on the first broken reference.

    The pool is not modified; the result is a new ValidatedConstantPool with
    the same entries.
    """
    visited: set[int] = set()
    for root in range(len(pool)):
        if root in visited:
            continue
        visited.add(root)
        stack = [_relations(pool, root)]
        while stack:
            target = next(stack[-1], None)
            if target is None:
                stack.pop()
            elif target not in visited:
                visited.add(target)
                stack.append(_relations(pool, target))

    unverified = [
        i for i, entry in enumerate(pool.entries)
        if isinstance(entry, InvokeDynamicConstant)
    ]
    return ValidatedConstantPool(pool.entries, unverified)


def verify_bootstrap_methods(pool: ValidatedConstantPool,
                             bootstrap_method_count: int) -> ValidatedConstantPool:
    """Check InvokeDynamic bootstrap indices against a BootstrapMethods table size."""
    for index in pool.unverified_bootstrap_methods:
        entry = pool.get(index, InvokeDynamicConstant)
        if not 0 <= entry.bootstrap_method_attr_index < bootstrap_method_count:
            raise ConstantPoolValidationError(
                ValidationFailure.INVOKE_DYNAMIC_BOOTSTRAP_METHOD,
                index,
                entry.bootstrap_method_attr_index,
            )
    return ValidatedConstantPool(pool.entries)
