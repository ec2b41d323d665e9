from dataclasses import dataclass

from .errors import StateDrifted
from .interfaces import FileStateSource
from .models import FileSnapshot, RestoreRecord

@dataclass(frozen=True)
class Verdict:
    snapshot: FileSnapshot
    valid: bool
    reason: str = ""

    @property
    def current_parent(self) -> str:
        # only meaningful for a valid verdict, where there is exactly one parent
        return next(iter(self.snapshot.parent_ids))

class PreflightValidator:
    """Checks a file still sits exactly where the incident left it.

    A file is movable only when it exists, is not trashed and has the scope
    folder as its one and only parent. Anything else is drift.
    """

    def __init__(self, states: FileStateSource, scope_folder_id: str):
        self.states = states
        self.scope_folder_id = scope_folder_id

    def check(self, rec: RestoreRecord) -> Verdict:
        # always a fresh fetch, state may have changed since the audit log
        snap = self.states.fetch_state(rec.file_id)
        return Verdict(snap, *self._classify(snap))

    def ensure(self, rec: RestoreRecord) -> Verdict:
        verdict = self.check(rec)
        if not verdict.valid:
            raise StateDrifted(rec.file_id, self.scope_folder_id,
                               verdict.snapshot.parent_ids, verdict.reason)
        return verdict

    def _classify(self, snap: FileSnapshot):
        expected = f"expected only {self.scope_folder_id}"
        if not snap.exists:
            return False, f"file not found ({expected})"
        if snap.trashed:
            return False, f"file is in the trash ({expected})"
        parents = snap.parent_ids
        if len(parents) == 1 and self.scope_folder_id in parents:
            return True, ""
        if not parents:
            return False, f"file has no parents ({expected})"
        if len(parents) > 1:
            return False, f"file has {len(parents)} parents: {', '.join(sorted(parents))} ({expected})"
        return False, f"file no longer in root (parent is {next(iter(parents))}, {expected})"
