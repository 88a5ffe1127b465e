import os
import plistlib
from datetime import datetime, timezone
from types import SimpleNamespace

from chromiumdetector.scanner import bundle
from chromiumdetector.scanner.base import INSTALL_DATE_UNKNOWN


def test_version_prefers_short_version(make_bundle):
    b = make_bundle("A.app", manifest={"CFBundleShortVersionString": "1.2.3", "CFBundleVersion": "4567"})
    assert bundle.version(b) == "1.2.3"


def test_version_falls_back_to_build_version(make_bundle):
    b = make_bundle("A.app", manifest={"CFBundleVersion": "4567"})
    assert bundle.version(b) == "4567"


def test_version_unknown_without_fields(make_bundle):
    b = make_bundle("A.app", manifest={"CFBundleName": "A"})
    assert bundle.version(b) == "Unknown"


def test_missing_manifest_degrades_to_sentinels(make_bundle):
    b = make_bundle("Bare.app")
    assert bundle.version(b) == "Unknown"
    assert bundle.bundle_identifier(b) is None
    assert bundle.executable_path(b) == "Unknown"


def test_garbage_manifest_degrades_to_sentinels(make_bundle):
    b = make_bundle("Broken.app")
    with open(os.path.join(b, "Contents", "Info.plist"), "wb") as f:
        f.write(b"<?xml version='1.0'?><plist><dict><key>oops")
    assert bundle.read_manifest(b) == {}
    assert bundle.version(b) == "Unknown"


def test_non_dictionary_manifest_is_ignored(make_bundle):
    b = make_bundle("List.app")
    with open(os.path.join(b, "Contents", "Info.plist"), "wb") as f:
        plistlib.dump(["not", "a", "dict"], f)
    assert bundle.read_manifest(b) == {}


def test_binary_plist_is_read(make_bundle):
    b = make_bundle("Bin.app")
    with open(os.path.join(b, "Contents", "Info.plist"), "wb") as f:
        plistlib.dump({"CFBundleIdentifier": "com.example.bin"}, f, fmt=plistlib.FMT_BINARY)
    assert bundle.bundle_identifier(b) == "com.example.bin"


def test_executable_path_from_manifest(make_bundle):
    b = make_bundle("Foo.app", manifest={"CFBundleIdentifier": "com.example.foo"}, executable="Foo")
    assert bundle.executable_path(b) == os.path.join(b, "Contents", "MacOS", "Foo")
    assert bundle.bundle_identifier(b) == "com.example.foo"


def test_install_date_uses_birthtime(monkeypatch, make_bundle):
    b = make_bundle("Dated.app")
    fake_os = SimpleNamespace(stat=lambda path: SimpleNamespace(st_birthtime=86400.0), path=os.path)
    monkeypatch.setattr(bundle, "os", fake_os)
    assert bundle.install_date(b) == datetime(1970, 1, 2, tzinfo=timezone.utc)


def test_install_date_sentinel_without_birthtime(monkeypatch, make_bundle):
    b = make_bundle("Dated.app")
    assert bundle.install_date(os.path.join(b, "missing")) == INSTALL_DATE_UNKNOWN
    fake_os = SimpleNamespace(stat=lambda path: SimpleNamespace(st_mtime=1.0), path=os.path)
    monkeypatch.setattr(bundle, "os", fake_os)
    assert bundle.install_date(b) == INSTALL_DATE_UNKNOWN
