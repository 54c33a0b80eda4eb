from __future__ import annotations

import pytest

from stagepath._paths import FsPath
from stagepath.errors import MalformedPathError


# --- parsing ------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw,expected",
    [
        ("hdfs://nn1/warehouse/db/tbl", FsPath("hdfs", "nn1", "/warehouse/db/tbl")),
        ("hdfs://nn1/warehouse/db/tbl/", FsPath("hdfs", "nn1", "/warehouse/db/tbl")),
        ("HDFS://nn1:8020/a//b/./c", FsPath("hdfs", "nn1:8020", "/a/b/c")),
        ("viewfs://cluster/a/b/../c", FsPath("viewfs", "cluster", "/a/c")),
        ("file:///tmp/x", FsPath("file", "", "/tmp/x")),
        ("hdfs://nn1", FsPath("hdfs", "nn1", "/")),
        ("s3://bucket/k?versionId=3#frag", FsPath("s3", "bucket", "/k")),
        ("hdfs://nn1/../../etc", FsPath("hdfs", "nn1", "/etc")),
    ],
)
def test_parse(raw: str, expected: FsPath) -> None:
    assert FsPath.parse(raw) == expected


@pytest.mark.parametrize(
    "raw", ["/warehouse/db/tbl", "warehouse/db", "", "hdfs:relative/path", "hdfs:", "hdfs://"]
)
def test_parse_rejects_unschemed_or_relative(raw: str) -> None:
    with pytest.raises(MalformedPathError) as ei:
        FsPath.parse(raw)
    assert ei.value.path == raw


def test_parse_accepts_fspath_instance() -> None:
    p = FsPath("hdfs", "nn1", "/a")
    assert FsPath.parse(p) == p


# --- derived values -------------------------------------------------------------

def test_str_and_identity() -> None:
    p = FsPath.parse("hdfs://nn1/warehouse/db")
    assert str(p) == "hdfs://nn1/warehouse/db"
    assert p.fs_identity == "hdfs://nn1"
    assert str(FsPath.parse("file:///tmp")) == "file:///tmp"


def test_parent_and_name() -> None:
    p = FsPath.parse("viewfs://cluster/warehouse/db/tbl")
    assert p.name == "tbl"
    assert p.parent == FsPath("viewfs", "cluster", "/warehouse/db")
    assert FsPath.parse("viewfs://cluster/warehouse").parent == FsPath("viewfs", "cluster", "/")
    assert FsPath.parse("viewfs://cluster/").parent is None


def test_joinpath_and_segments() -> None:
    p = FsPath.parse("hdfs://nn1/a")
    assert p.joinpath("b", "c") == FsPath("hdfs", "nn1", "/a/b/c")
    assert (p / "_tmp.ext.10001").path == "/a/_tmp.ext.10001"
    assert p.joinpath("b/c").segments() == ("a", "b", "c")
    with pytest.raises(ValueError):
        p.joinpath("/abs")


def test_with_path_requires_absolute() -> None:
    p = FsPath.parse("hdfs://nn1/a")
    assert p.with_path("/x/y/") == FsPath("hdfs", "nn1", "/x/y")
    with pytest.raises(MalformedPathError):
        p.with_path("x")


def test_fspath_is_path_component() -> None:
    import os

    assert os.fspath(FsPath.parse("file:///tmp/x")) == "/tmp/x"
