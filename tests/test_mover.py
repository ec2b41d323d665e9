import pytest

from conftest import ROOT, FakeDrive
from driverestore.errors import MoveFailed
from driverestore.models import Outcome, RestoreRecord
from driverestore.mover import ReverseMover

REC = RestoreRecord("X", "x.docx", "F1", "Finance")

def test_live_move_is_one_call_and_leaves_only_origin_parent():
    drive = FakeDrive({"X": {ROOT}})
    outcome = ReverseMover(drive, dry_run=False).move_one(REC, ROOT)
    assert outcome is Outcome.MOVED
    assert drive.moves == [("X", "F1", ROOT)]
    assert drive.parents["X"] == {"F1"}

def test_dry_run_does_not_touch_drive():
    drive = FakeDrive({"X": {ROOT}})
    outcome = ReverseMover(drive).move_one(REC, ROOT)
    assert outcome is Outcome.SIMULATED
    assert drive.moves == []
    assert drive.parents["X"] == {ROOT}

def test_transport_error_becomes_move_failed():
    drive = FakeDrive({"X": {ROOT}})
    drive.fail_moves.add("X")
    with pytest.raises(MoveFailed) as exc:
        ReverseMover(drive, dry_run=False).move_one(REC, ROOT)
    assert exc.value.file_id == "X"
    assert "403" in str(exc.value.cause)
