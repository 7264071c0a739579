"""
Helpers that assemble class file bytes for the tests.
Indices passed to these helpers are the raw 1-based values stored in the file.
"""

import struct


MAGIC = 0xCAFEBABE

CODE_INIT = bytes([
    0, 2, 0, 1, 0, 0, 0, 10, 42, 183, 0, 1, 42, 4, 181, 0, 7, 177, 0, 0,
    0, 1, 0, 28, 0, 0, 0, 10, 0, 2, 0, 0, 0, 1, 0, 4, 0, 2,
])
CODE_MAIN = bytes([
    0, 2, 0, 1, 0, 0, 0, 9, 178, 0, 13, 18, 19, 182, 0, 21, 177, 0, 0, 0,
    1, 0, 28, 0, 0, 0, 10, 0, 2, 0, 0, 0, 4, 0, 8, 0, 5,
])


class PoolBuilder:
    """Writes constant pool entries and hands out their raw indices."""

    def __init__(self):
        self.data = bytearray()
        self.count = 1  # next raw index; also the constant_pool_count field

    def _add(self, tag: int, payload: bytes, slots: int = 1) -> int:
        idx = self.count
        self.data.append(tag)
        self.data.extend(payload)
        self.count += slots
        return idx

    def utf8(self, value) -> int:
        data = value.encode("utf-8") if isinstance(value, str) else value
        return self._add(1, struct.pack(">H", len(data)) + data)

    def integer(self, value: int) -> int:
        return self._add(3, struct.pack(">i", value))

    def float32(self, value: float) -> int:
        return self._add(4, struct.pack(">f", value))

    def long(self, value: int) -> int:
        return self._add(5, struct.pack(">q", value), slots=2)

    def double(self, value: float) -> int:
        return self._add(6, struct.pack(">d", value), slots=2)

    def klass(self, name_idx: int) -> int:
        return self._add(7, struct.pack(">H", name_idx))

    def string(self, utf8_idx: int) -> int:
        return self._add(8, struct.pack(">H", utf8_idx))

    def fieldref(self, class_idx: int, nat_idx: int) -> int:
        return self._add(9, struct.pack(">HH", class_idx, nat_idx))

    def methodref(self, class_idx: int, nat_idx: int) -> int:
        return self._add(10, struct.pack(">HH", class_idx, nat_idx))

    def interface_methodref(self, class_idx: int, nat_idx: int) -> int:
        return self._add(11, struct.pack(">HH", class_idx, nat_idx))

    def name_and_type(self, name_idx: int, desc_idx: int) -> int:
        return self._add(12, struct.pack(">HH", name_idx, desc_idx))

    def method_handle(self, kind: int, ref_idx: int) -> int:
        return self._add(15, struct.pack(">BH", kind, ref_idx))

    def method_type(self, desc_idx: int) -> int:
        return self._add(16, struct.pack(">H", desc_idx))

    def invoke_dynamic(self, bootstrap_idx: int, nat_idx: int) -> int:
        return self._add(18, struct.pack(">HH", bootstrap_idx, nat_idx))

    def add_class(self, name: str) -> int:
        return self.klass(self.utf8(name))

    def to_bytes(self) -> bytes:
        return struct.pack(">H", self.count) + bytes(self.data)


def attributes_bytes(attributes=()) -> bytes:
    out = bytearray(struct.pack(">H", len(attributes)))
    for name_idx, info in attributes:
        out.extend(struct.pack(">HI", name_idx, len(info)))
        out.extend(info)
    return bytes(out)


def members_bytes(members=()) -> bytes:
    out = bytearray(struct.pack(">H", len(members)))
    for member in members:
        flags, name_idx, desc_idx = member[:3]
        attributes = member[3] if len(member) > 3 else ()
        out.extend(struct.pack(">HHH", flags, name_idx, desc_idx))
        out.extend(attributes_bytes(attributes))
    return bytes(out)


def build_class(pool: PoolBuilder, this_class: int, super_class: int,
                access_flags: int = 0x0021, interfaces=(), fields=(), methods=(),
                attributes=(), magic: int = MAGIC, minor: int = 0, major: int = 63) -> bytes:
    out = bytearray(struct.pack(">IHH", magic, minor, major))
    out.extend(pool.to_bytes())
    out.extend(struct.pack(">HHH", access_flags, this_class, super_class))
    out.extend(struct.pack(">H", len(interfaces)))
    for idx in interfaces:
        out.extend(struct.pack(">H", idx))
    out.extend(members_bytes(fields))
    out.extend(members_bytes(methods))
    out.extend(attributes_bytes(attributes))
    return bytes(out)


def simple_class(pool: PoolBuilder = None, **kwargs) -> bytes:
    """A class Foo extending java/lang/Object, with extra pool entries from pool."""
    pool = pool or PoolBuilder()
    this_class = pool.add_class("Foo")
    super_class = pool.add_class("java/lang/Object")
    return build_class(pool, this_class, super_class, **kwargs)


def main_class_bytes() -> bytes:
    """The class javac 19 emits for:

        public class Main {
            public int a = 1;
            public static void main(String[] args) {
                System.out.println("Hello World!");
            }
        }
    """
    pool = PoolBuilder()
    pool.methodref(2, 3)                        # 1
    pool.klass(4)                               # 2
    pool.name_and_type(5, 6)                    # 3
    pool.utf8("java/lang/Object")               # 4
    pool.utf8("<init>")                         # 5
    pool.utf8("()V")                            # 6
    pool.fieldref(8, 9)                         # 7
    pool.klass(10)                              # 8
    pool.name_and_type(11, 12)                  # 9
    pool.utf8("Main")                           # 10
    pool.utf8("a")                              # 11
    pool.utf8("I")                              # 12
    pool.fieldref(14, 15)                       # 13
    pool.klass(16)                              # 14
    pool.name_and_type(17, 18)                  # 15
    pool.utf8("java/lang/System")               # 16
    pool.utf8("out")                            # 17
    pool.utf8("Ljava/io/PrintStream;")          # 18
    pool.string(20)                             # 19
    pool.utf8("Hello World!")                   # 20
    pool.methodref(22, 23)                      # 21
    pool.klass(24)                              # 22
    pool.name_and_type(25, 26)                  # 23
    pool.utf8("java/io/PrintStream")            # 24
    pool.utf8("println")                        # 25
    pool.utf8("(Ljava/lang/String;)V")          # 26
    pool.utf8("Code")                           # 27
    pool.utf8("LineNumberTable")                # 28
    pool.utf8("main")                           # 29
    pool.utf8("([Ljava/lang/String;)V")         # 30
    pool.utf8("SourceFile")                     # 31
    pool.utf8("Main.java")                      # 32

    return build_class(
        pool,
        this_class=8,
        super_class=2,
        access_flags=0x0021,
        fields=[(0x0001, 11, 12)],
        methods=[
            (0x0001, 5, 6, [(27, CODE_INIT)]),
            (0x0009, 29, 30, [(27, CODE_MAIN)]),
        ],
        attributes=[(31, bytes([0, 32]))],
    )
