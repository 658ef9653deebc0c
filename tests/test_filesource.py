"""Tests for candidate path resolution and file reading."""

import io
import os
import sys
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from distrodetect.filesource import CandidateNotFoundError, FileSource, MemoryFileSource
from distrodetect.logging import DetectLogger


def make_root(tmp_path, files):
    for path, contents in files.items():
        target = tmp_path / path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(contents)
    return str(tmp_path)


class TestResolve:
    def test_default_root_is_passthrough(self):
        assert FileSource().resolve("/etc/os-release") == "/etc/os-release"

    def test_root_prefix(self):
        files = FileSource(root="/mnt/image")
        assert files.resolve("/etc/os-release") == "/mnt/image/etc/os-release"

    def test_root_prefix_is_normalized(self):
        files = FileSource(root="/mnt/image/")
        assert files.resolve("/etc/../etc/os-release") == "/mnt/image/etc/os-release"


class TestOpenFirst:
    def test_first_existing_candidate_wins(self, tmp_path):
        root = make_root(tmp_path, {"/etc/redhat-release": "Fedora release 20 (Heisenbug)\n"})
        files = FileSource(root=root)
        handle, resolved = files.open_first(["/etc/centos-release", "/etc/redhat-release"])
        with handle:
            assert handle.read() == b"Fedora release 20 (Heisenbug)\n"
        assert resolved == os.path.join(root, "etc/redhat-release")

    def test_candidate_order(self, tmp_path):
        root = make_root(tmp_path, {
            "/etc/sl-release": "Scientific Linux release 7.9 (Nitrogen)\n",
            "/etc/redhat-release": "Red Hat Enterprise Linux Server release 7.9\n",
        })
        files = FileSource(root=root)
        assert files.read_text("/etc/sl-release", "/etc/redhat-release").startswith("Scientific")
        assert files.read_text("/etc/redhat-release", "/etc/sl-release").startswith("Red Hat")

    def test_directory_is_skipped(self, tmp_path):
        root = make_root(tmp_path, {"/etc/issue": "Debian GNU/Linux 10 \\n \\l\n"})
        (tmp_path / "etc" / "os-release").mkdir()
        files = FileSource(root=root)
        assert files.read_text("/etc/os-release", "/etc/issue").startswith("Debian")

    def test_nothing_found(self, tmp_path):
        files = FileSource(root=str(tmp_path))
        with pytest.raises(CandidateNotFoundError) as excinfo:
            files.open_first(["/etc/os-release", "/etc/lsb-release"])
        assert excinfo.value.paths == ["/etc/os-release", "/etc/lsb-release"]

    def test_open_failure_is_logged(self, tmp_path, capsys):
        root = make_root(tmp_path, {"/etc/os-release": "ID=arch\n"})
        files = FileSource(root=root)
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(OSError):
                files.open_first(["/etc/os-release"])
        assert "error: unable to open file" in capsys.readouterr().err


class TestReadText:
    def test_missing_file_is_none(self, tmp_path):
        assert FileSource(root=str(tmp_path)).read_text("/etc/alpine-release") is None

    def test_unreadable_file_is_none(self, tmp_path, capsys):
        root = make_root(tmp_path, {"/etc/alpine-release": "3.12.1\n"})
        files = FileSource(root=root)
        with patch("builtins.open", side_effect=PermissionError("denied")):
            assert files.read_text("/etc/alpine-release") is None
        assert "denied" in capsys.readouterr().err

    def test_read_failure_is_none(self, capsys):
        class BrokenHandle(io.BytesIO):
            def read(self, *args):
                raise OSError("I/O error")

        files = MemoryFileSource({"/etc/issue": "Debian"})
        with patch.object(MemoryFileSource, "_open", return_value=BrokenHandle()):
            assert files.read_text("/etc/issue") is None
        assert "unable to read file (/etc/issue)" in capsys.readouterr().err

    def test_invalid_utf8_is_replaced(self):
        files = MemoryFileSource({"/etc/issue": b"Debian \xff\n"})
        assert files.read_text("/etc/issue") == "Debian \ufffd\n"


class TestExists:
    def test_any_candidate(self):
        files = MemoryFileSource({"/etc/lsb-release": "DISTRIB_ID=Ubuntu\n"})
        assert files.exists("/etc/os-release", "/etc/lsb-release")
        assert not files.exists("/etc/os-release")


class TestMemoryFileSource:
    def test_str_and_bytes_contents(self):
        files = MemoryFileSource({"/a": "text", "/b": b"\x00\x01"})
        assert files.read_text("/a") == "text"
        handle, _ = files.open_first(["/b"])
        assert handle.read() == b"\x00\x01"

    def test_root_applies_to_keys(self):
        files = MemoryFileSource({"/mnt/image/etc/os-release": "ID=nixos\n"}, root="/mnt/image")
        assert files.read_text("/etc/os-release") == "ID=nixos\n"
        assert files.read_text("/mnt/image/etc/os-release") is None

    def test_uses_injected_logger(self):
        log = DetectLogger()
        assert MemoryFileSource(log=log).log is log
