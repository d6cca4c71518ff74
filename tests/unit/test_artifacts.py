"""Unit tests for artifact naming, relocation and cleanup."""

import os
import re
import time

import pytest

from titleorder.contexts.rendering.artifacts import (
    BYPRODUCT_FILES,
    STAGING_DIR_PREFIX,
    create_staging_dir,
    date_segment,
    discard_artifact,
    purge_byproducts,
    relocate_artifact,
    safe_title,
    sweep_stale_staging_dirs,
    unique_pdf_path,
)
from titleorder.contexts.rendering.exceptions import ArtifactRelocationError
from titleorder.contexts.templating.order_data_structure import DocumentRecord


@pytest.mark.unit
@pytest.mark.parametrize(
    "title, expected",
    [
        ("Smith Estate #42", "Smith_Estate_42"),
        ("  Lot 7 / Block 3 -- (rev. 2)  ", "Lot_7_Block_3_rev_2"),
        ("A&&&B", "A_B"),
        ("plain", "plain"),
        ("!!!", "untitled"),
        ("", "untitled"),
        (None, "untitled"),
    ],
)
def test_safe_title(title, expected):
    assert safe_title(title) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "title",
    ["Smith, Jones & Co. / North #7", "__weird__ //title\\\\ ", "ÄÖÜ estate", "a  b\t\nc"],
)
def test_safe_title_has_only_alnum_and_single_separators(title):
    result = safe_title(title)
    assert re.fullmatch(r"[A-Za-z0-9]+(_[A-Za-z0-9]+)*", result)


@pytest.mark.unit
@pytest.mark.parametrize(
    "date_ordered, expected",
    [("10/17/2026", "10-17-2026"), ("2026-10-17", "2026-10-17"), ("", "undated"), (None, "undated")],
)
def test_date_segment(date_ordered, expected):
    assert date_segment(date_ordered) == expected


@pytest.mark.unit
def test_unique_pdf_path(tmp_path):
    record = DocumentRecord(title="Smith Estate #42", date_ordered="10/17/2026")
    path = unique_pdf_path(record, tmp_path)

    assert path == tmp_path / "Smith_Estate_42_10-17-2026.pdf"
    assert "__" not in path.name


@pytest.mark.unit
def test_staging_dirs_are_distinct(tmp_path):
    first = create_staging_dir(tmp_path)
    second = create_staging_dir(tmp_path)

    assert first != second
    assert first.name.startswith(STAGING_DIR_PREFIX)
    record = DocumentRecord(title="Same", date_ordered="01/01/2026")
    assert unique_pdf_path(record, first) != unique_pdf_path(record, second)


@pytest.mark.unit
def test_relocate_artifact(tmp_path):
    compiled = tmp_path / "output.pdf"
    compiled.write_bytes(b"%PDF-1.4")
    destination = tmp_path / "Order_01-01-2026.pdf"

    assert relocate_artifact(compiled, destination) == destination
    assert destination.read_bytes() == b"%PDF-1.4"
    assert compiled.exists()


@pytest.mark.unit
def test_relocate_artifact_detects_missing_destination(tmp_path, monkeypatch):
    compiled = tmp_path / "output.pdf"
    compiled.write_bytes(b"%PDF-1.4")

    # Simulate a copy that reports success but leaves nothing behind
    monkeypatch.setattr("shutil.copyfile", lambda src, dst: dst)

    with pytest.raises(ArtifactRelocationError):
        relocate_artifact(compiled, tmp_path / "Order_01-01-2026.pdf")


@pytest.mark.unit
def test_purge_byproducts_removes_everything(tmp_path):
    for name in BYPRODUCT_FILES:
        (tmp_path / name).write_text("x")
    keep = tmp_path / "Order_01-01-2026.pdf"
    keep.write_text("pdf")

    assert purge_byproducts(tmp_path) == []
    assert list(tmp_path.iterdir()) == [keep]


@pytest.mark.unit
def test_purge_byproducts_tolerates_missing_files(tmp_path):
    (tmp_path / "output.log").write_text("x")
    assert purge_byproducts(tmp_path) == []
    assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
def test_purge_byproducts_continues_after_failure(tmp_path):
    # A directory named like a byproduct cannot be unlinked
    (tmp_path / "output.aux").mkdir()
    for name in BYPRODUCT_FILES[1:]:
        (tmp_path / name).write_text("x")

    leftovers = purge_byproducts(tmp_path)

    assert leftovers == [tmp_path / "output.aux"]
    assert [p.name for p in tmp_path.iterdir()] == ["output.aux"]


@pytest.mark.unit
def test_discard_artifact_removes_pdf_and_staging_dir(tmp_path):
    staging_dir = create_staging_dir(tmp_path)
    pdf = staging_dir / "Order_01-01-2026.pdf"
    pdf.write_bytes(b"%PDF-1.4")

    discard_artifact(pdf)

    assert not pdf.exists()
    assert not staging_dir.exists()


@pytest.mark.unit
def test_discard_artifact_leaves_foreign_dirs(tmp_path):
    pdf = tmp_path / "Order.pdf"
    pdf.write_bytes(b"%PDF-1.4")

    discard_artifact(pdf)

    assert not pdf.exists()
    assert tmp_path.exists()


def _make_aged_dir(root, name, age_s):
    path = root / name
    path.mkdir()
    (path / "Order_01-02-2026.pdf").write_bytes(b"%PDF-1.4")
    stamp = time.time() - age_s
    os.utime(path, (stamp, stamp))
    return path


@pytest.mark.unit
def test_sweep_removes_only_stale_staging_dirs(tmp_path):
    stale = _make_aged_dir(tmp_path, f"{STAGING_DIR_PREFIX}abandoned", age_s=7200)
    fresh = _make_aged_dir(tmp_path, f"{STAGING_DIR_PREFIX}inflight", age_s=10)
    foreign = _make_aged_dir(tmp_path, "keepme", age_s=7200)

    removed = sweep_stale_staging_dirs(tmp_path, max_age_s=3600)

    assert removed == [stale]
    assert not stale.exists()
    assert fresh.exists()
    assert foreign.exists()


@pytest.mark.unit
def test_sweep_missing_root_is_noop(tmp_path):
    assert sweep_stale_staging_dirs(tmp_path / "absent") == []
