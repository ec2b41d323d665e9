"""Reconciliation engine.

audit activities -> parse -> group by origin folder -> for each record:
validate against live state -> move (or simulate) -> count.

Everything that touches Google is injected, so the whole flow runs against
fakes in tests. Only FatalSetupError escapes a run; per-file problems end up in
the RunReport.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .errors import FatalSetupError, MoveFailed, StateDrifted, TransportError
from .grouping import group_by_origin
from .interfaces import AuditSource, FileStateSource, MoveTransport
from .models import MalformedEvent, Outcome, RecordResult, RunParams, RunPlan
from .mover import ReverseMover
from .parser import parse_activities
from .progress import ProgressEvent, RunStats
from .utils import validate_run_params
from .validator import PreflightValidator

logger = logging.getLogger(__name__)

@dataclass
class RunReport:
    params: RunParams
    results: List[RecordResult] = field(default_factory=list)
    malformed: List[MalformedEvent] = field(default_factory=list)
    stats: Optional[RunStats] = None

    def _with(self, outcome: Outcome) -> List[RecordResult]:
        return [r for r in self.results if r.outcome is outcome]

    @property
    def moved(self) -> List[RecordResult]:
        return self._with(Outcome.MOVED)

    @property
    def skipped(self) -> List[RecordResult]:
        return self._with(Outcome.DRIFTED)

    @property
    def simulated(self) -> List[RecordResult]:
        return self._with(Outcome.SIMULATED)

    @property
    def failed(self) -> List[RecordResult]:
        return self._with(Outcome.FAILED)

class Reconciler:
    def __init__(
        self,
        audit: AuditSource,
        states: FileStateSource,
        transport: MoveTransport,
        on_progress: Optional[Callable[[ProgressEvent], None]] = None,
    ):
        self.audit = audit
        self.states = states
        self.transport = transport
        self.on_progress = on_progress

    def plan(self, params: RunParams) -> RunPlan:
        validate_run_params(params)
        try:
            activities = self.audit.fetch_moves(
                params.scope_folder_id, params.start, params.end, params.actor_ip
            )
        except TransportError as e:
            raise FatalSetupError(f"Could not read the audit log: {e}") from e

        records, malformed = parse_activities(activities)
        groups = group_by_origin(records)
        logger.info("Audit window holds %d restorable files in %d folders (%d malformed events)",
                    len(records), len(groups), len(malformed))
        return RunPlan(params=params, groups=groups, malformed=malformed)

    def run(self, params: RunParams, plan: Optional[RunPlan] = None) -> RunReport:
        if plan is None:
            plan = self.plan(params)
        else:
            validate_run_params(params)

        stats = RunStats(plan.total_records, listener=self.on_progress)
        report = RunReport(params=params, malformed=list(plan.malformed), stats=stats)
        validator = PreflightValidator(self.states, params.scope_folder_id)
        mover = ReverseMover(self.transport, dry_run=params.simulate)

        for i, group in enumerate(plan.groups, 1):
            stats.begin_group(i, len(plan.groups), group)
            for rec in group.records:
                outcome, reason, parents = self._process(rec, validator, mover)
                pct = stats.record(rec, outcome, reason)
                report.results.append(RecordResult(rec, outcome, reason, parents, pct))

        logger.info("Run finished: %s", stats.as_dict())
        return report

    def _process(self, rec, validator: PreflightValidator, mover: ReverseMover):
        try:
            verdict = validator.ensure(rec)
        except TransportError as e:
            logger.error("Could not read state of %s (%s): %s", rec.file_name, rec.file_id, e)
            return Outcome.FAILED, f"state fetch failed: {e}", frozenset()
        except StateDrifted as e:
            logger.info("Skipping %s (%s): %s", rec.file_name, rec.file_id, e.reason)
            return Outcome.DRIFTED, e.reason, e.actual

        parents = verdict.snapshot.parent_ids

        try:
            outcome = mover.move_one(rec, verdict.current_parent)
        except MoveFailed as e:
            logger.error("%s", e)
            return Outcome.FAILED, str(e.cause), parents
        return outcome, "", parents
