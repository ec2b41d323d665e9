import pytest

from conftest import ROOT, FakeDrive
from driverestore.errors import StateDrifted
from driverestore.models import RestoreRecord
from driverestore.validator import PreflightValidator

REC = RestoreRecord("X", "x.docx", "F1", "Finance")

def check(parents, trashed=False):
    drive = FakeDrive({"X": parents})
    if trashed:
        drive.trashed.add("X")
    return PreflightValidator(drive, ROOT).check(REC)

def test_single_parent_equal_to_scope_is_valid():
    verdict = check({ROOT})
    assert verdict.valid
    assert verdict.current_parent == ROOT

def test_extra_parent_is_drift():
    verdict = check({ROOT, "B"})
    assert not verdict.valid
    assert "2 parents" in verdict.reason

def test_other_parent_is_drift():
    verdict = check({"F1"})
    assert not verdict.valid
    assert "no longer in root" in verdict.reason

def test_no_parents_is_drift():
    assert not check(set()).valid

def test_trashed_file_is_drift():
    verdict = check({ROOT}, trashed=True)
    assert not verdict.valid
    assert "trash" in verdict.reason

def test_missing_file_is_drift():
    verdict = PreflightValidator(FakeDrive({}), ROOT).check(REC)
    assert not verdict.valid
    assert verdict.reason == "file not found (expected only ROOT)"

def test_every_check_fetches_fresh_state():
    drive = FakeDrive({"X": {ROOT}})
    v = PreflightValidator(drive, ROOT)
    v.check(REC)
    v.check(REC)
    assert drive.fetches == ["X", "X"]

def test_ensure_raises_state_drifted():
    drive = FakeDrive({"X": {ROOT, "B"}})
    with pytest.raises(StateDrifted) as exc:
        PreflightValidator(drive, ROOT).ensure(REC)
    assert exc.value.expected == ROOT
    assert exc.value.actual == frozenset({ROOT, "B"})

@pytest.mark.parametrize("parents,trashed", [
    ({ROOT, "B"}, False),
    ({"F1"}, False),
    (set(), False),
    ({ROOT}, True),
])
def test_drift_reason_names_expected_parent(parents, trashed):
    verdict = check(parents, trashed)
    assert not verdict.valid
    assert "expected only ROOT" in verdict.reason
    for parent in parents - {ROOT}:
        assert parent in verdict.reason
