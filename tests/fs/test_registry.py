from __future__ import annotations

import pytest

from stagepath.errors import FileSystemUnavailableError, MalformedPathError
from stagepath.fs import FileSystem, FileSystemRegistry, LocalFileSystem, MemoryFileSystem


def test_default_schemes() -> None:
    reg = FileSystemRegistry()
    assert {"file", "mem"} <= reg.schemes()
    assert isinstance(reg.get("file:///tmp"), LocalFileSystem)
    assert isinstance(reg.get("mem:///"), MemoryFileSystem)


def test_clients_satisfy_protocol() -> None:
    assert isinstance(LocalFileSystem(), FileSystem)
    assert isinstance(MemoryFileSystem(), FileSystem)


def test_one_client_per_identity() -> None:
    reg = FileSystemRegistry({"hdfs": MemoryFileSystem})
    a = reg.get("hdfs://nn1/a")
    assert reg.get("hdfs://nn1/b/c") is a
    other = reg.get("hdfs://nn2/a")
    assert other is not a
    assert (other.scheme, other.authority) == ("hdfs", "nn2")
    assert set(reg.clients()) == {"hdfs://nn1", "hdfs://nn2"}


def test_unknown_scheme() -> None:
    reg = FileSystemRegistry(include_defaults=False)
    with pytest.raises(FileSystemUnavailableError) as ei:
        reg.get("file:///tmp")
    assert isinstance(ei.value.cause, LookupError)


def test_factory_failure_is_wrapped() -> None:
    def broken(scheme: str, authority: str) -> FileSystem:
        raise ConnectionError(f"cannot reach {authority}")

    reg = FileSystemRegistry({"hdfs": broken})
    with pytest.raises(FileSystemUnavailableError) as ei:
        reg.get("hdfs://nn1/t")
    assert isinstance(ei.value.__cause__, ConnectionError)
    assert "hdfs://nn1/t" in str(ei.value)
    assert reg.clients() == {}


def test_local_rejects_remote_authority() -> None:
    with pytest.raises(FileSystemUnavailableError):
        FileSystemRegistry().get("file://otherhost/tmp")


@pytest.mark.parametrize("target", ["stagepath.fs.memory:MemoryFileSystem"])
def test_string_targets(target: str) -> None:
    reg = FileSystemRegistry()
    reg.register("HDFS", target)
    assert isinstance(reg.get("hdfs://nn1/"), MemoryFileSystem)


@pytest.mark.parametrize("target", ["no_colon", "stagepath.fs.memory:Nope", "not_a_module_xyz:Thing"])
def test_bad_string_targets(target: str) -> None:
    reg = FileSystemRegistry({"hdfs": target})
    with pytest.raises(FileSystemUnavailableError):
        reg.get("hdfs://nn1/")


def test_malformed_path() -> None:
    with pytest.raises(MalformedPathError):
        FileSystemRegistry().get("/tmp/x")


def test_close_all_and_context_manager() -> None:
    with FileSystemRegistry() as reg:
        fs = reg.get("mem:///")
        assert isinstance(fs, MemoryFileSystem)
    assert fs.closed
    assert reg.clients() == {}
    # a fresh session is opened on demand
    assert reg.get("mem:///") is not fs
