import os
import plistlib
import struct

import pytest

from chromiumdetector.inspector.base import BaseLister

MH_MAGIC = 0xFEEDFACE
MH_MAGIC_64 = 0xFEEDFACF
FAT_MAGIC = 0xCAFEBABE
LC_LOAD_DYLIB = 0x0C
LC_UUID = 0x1B


def build_macho(names, bits=64, endian="<"):
    """Assemble a minimal Mach-O executable linking the given install names."""
    commands = [struct.pack(endian + "II", LC_UUID, 24) + b"\x11" * 16]
    for name in names:
        raw = name.encode("utf-8") + b"\0"
        size = 24 + len(raw)
        size += -size % 8
        body = struct.pack(endian + "IIIIII", LC_LOAD_DYLIB, size, 24, 2, 0x10000, 0x10000)
        commands.append((body + raw).ljust(size, b"\0"))
    blob = b"".join(commands)
    if bits == 64:
        header = struct.pack(endian + "IiiIIIII", MH_MAGIC_64, 0x01000007, 3, 2, len(commands), len(blob), 0, 0)
    else:
        header = struct.pack(endian + "IiiIIII", MH_MAGIC, 7, 3, 2, len(commands), len(blob), 0)
    return header + blob


def build_fat(slices):
    offset = 4096
    header = struct.pack(">II", FAT_MAGIC, len(slices))
    body = b""
    for data in slices:
        header += struct.pack(">iiIII", 0x01000007, 3, offset + len(body), len(data), 12)
        body += data.ljust(4096, b"\0")
    return header.ljust(offset, b"\0") + body


class FakeLister(BaseLister):
    """Returns canned dependency text and records every call."""

    def __init__(self, output="", error=None):
        self.output = output
        self.error = error
        self.calls = []

    def list_dependencies(self, executable):
        self.calls.append(executable)
        if self.error:
            raise self.error
        return self.output(executable) if callable(self.output) else self.output


@pytest.fixture
def make_bundle(tmp_path):
    def make(name, parent=None, frameworks=(), manifest=None, executable=None, executable_data=b"\0" * 64):
        root = os.path.join(str(parent or tmp_path), name)
        contents = os.path.join(root, "Contents")
        os.makedirs(contents)
        if frameworks:
            os.makedirs(os.path.join(contents, "Frameworks"))
            for fw in frameworks:
                os.makedirs(os.path.join(contents, "Frameworks", fw))
        info = dict(manifest or {})
        if executable:
            info["CFBundleExecutable"] = executable
            os.makedirs(os.path.join(contents, "MacOS"))
            with open(os.path.join(contents, "MacOS", executable), "wb") as f:
                f.write(executable_data)
        if manifest is not None or executable:
            with open(os.path.join(contents, "Info.plist"), "wb") as f:
                plistlib.dump(info, f)
        return root
    return make
