"""
Exceptions raised while reading and validating Java class files.
"""

from typing import Optional


class ClassFileError(Exception):
    """Base class for every error raised by pyjclass."""
    pass


class ClassReadError(ClassFileError):
    """The underlying stream failed or ended before a read was satisfied."""
    pass


class InvalidMagicNumber(ClassFileError):
    """The file does not start with 0xCAFEBABE."""

    def __init__(self, magic: int):
        super().__init__(f"expected magic number 0xcafebabe, got {magic:#010x}")
        self.magic = magic


class InvalidUtf8Constant(ClassFileError):
    """A CONSTANT_Utf8 payload is not valid UTF-8."""
    pass


class InvalidMethodHandleReferenceKind(ClassFileError):
    """A CONSTANT_MethodHandle carries a reference kind outside 1..9."""

    def __init__(self, kind: int):
        super().__init__(f"invalid method handle reference kind: {kind}")
        self.kind = kind


class UnrecognizedConstantTag(ClassFileError):
    """A constant pool entry starts with an unknown tag byte."""

    def __init__(self, tag: int, offset: int):
        super().__init__(f"unrecognized constant pool tag {tag} at offset {offset}")
        self.tag = tag
        self.offset = offset


class ConstantPoolValidationError(ClassFileError):
    """A constant pool entry references an entry of the wrong kind."""

    def __init__(self, failure, index: int, target: Optional[int] = None):
        message = f"invalid constant pool: entry #{index}: {failure.value}"
        if target is not None:
            message += f" (index {target})"
        super().__init__(message)
        self.failure = failure
        self.index = index
        self.target = target


class ConstantPoolIndexError(ClassFileError, IndexError):
    """A checked lookup addressed a position outside the constant pool."""
    pass


class ConstantPoolTypeError(ClassFileError, TypeError):
    """A checked lookup found a constant of an unexpected kind."""
    pass


class InvalidAccessFlags(ClassFileError):
    """An access flag word contains bits outside the legal vocabulary."""

    def __init__(self, owner: str, bits: int, unknown: int):
        super().__init__(
            f"{owner} has invalid access flags {bits:#06x} (unknown bits {unknown:#06x})"
        )
        self.owner = owner
        self.bits = bits
        self.unknown = unknown
