import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from driverestore.config import load_config
from driverestore.engine import Reconciler
from driverestore.errors import ConfigError, FatalSetupError
from driverestore.google_api import DriveFiles, ReportsAuditSource, make_session
from driverestore.logger import RunLogger
from driverestore.models import Outcome, RunParams
from driverestore.progress import ProgressEvent
from driverestore.utils import ensure_dir, parse_timestamp

def ask_yes_no(prompt: str) -> bool:
    return input(prompt + " [y/N]: ").strip().lower() == "y"

def _now() -> str:
    return datetime.now().strftime("%H:%M:%S")

def print_progress(ev: ProgressEvent) -> None:
    if ev.kind == "group":
        print(f"{_now()}: Folder '{ev.folder_name}' ({ev.folder_id}) used to contain "
              f"{ev.group_size} orphaned files. ({ev.group_index}/{ev.group_count})")
        return

    line = f"{_now()}: ... {ev.file_name} ({ev.file_id}) -> {ev.folder_id}"
    if ev.outcome is Outcome.MOVED:
        print(f"{line} [Completed {ev.percent:.1f}%]")
    elif ev.outcome is Outcome.SIMULATED:
        print(f"{line} [DRY RUN - NOT MOVED] [Completed {ev.percent:.1f}%]")
    elif ev.outcome is Outcome.DRIFTED:
        print(f"{line} [SKIPPED - {ev.reason}] [{ev.percent:.1f}%]")
    else:
        print(f"{line} [FAILED - {ev.reason}] [{ev.percent:.1f}%]")

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Move files that were dumped into a shared drive root back to their original folders."
    )
    ap.add_argument("--drive-id", required=True, help="The shared drive id (where the files were moved to).")
    ap.add_argument("--move-start", required=True, type=parse_timestamp,
                    help="When the moves began, e.g. '2024-03-01 09:00:00'.")
    ap.add_argument("--move-end", required=True, type=parse_timestamp,
                    help="When the moves finished.")
    ap.add_argument("--ip", default=None, help="Only restore moves that came from this IP address.")
    ap.add_argument("--dry", action="store_true", help="Validate everything but do not move any file.")
    ap.add_argument("--yes", action="store_true", help="Do not ask for confirmation.")
    ap.add_argument("--config", type=Path, default=None, help="Path to a driverestore.json config file.")
    ap.add_argument("--verbose", action="store_true")
    return ap

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        cfg = load_config(args.config)
        cfg.require_tokens()
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    params = RunParams(
        scope_folder_id=args.drive_id,
        start=args.move_start,
        end=args.move_end,
        actor_ip=args.ip,
        simulate=args.dry,
    )
    drive = DriveFiles(make_session(cfg.drive_token), timeout=cfg.timeout)
    audit = ReportsAuditSource(make_session(cfg.reports_token), timeout=cfg.timeout)
    engine = Reconciler(audit, drive, drive, on_progress=print_progress)

    try:
        plan = engine.plan(params)
    except FatalSetupError as e:
        print(f"Aborted: {e}", file=sys.stderr)
        return 2

    by_ip = f" by {params.actor_ip}" if params.actor_ip else ""
    print(f"Found {plan.total_records} files that were moved to the drive root between "
          f"{params.start} and {params.end}{by_ip}.")
    if plan.malformed:
        print(f"{len(plan.malformed)} audit events could not be read and will be ignored.")
    if plan.total_records == 0:
        return 0

    dry_note = " (DRY RUN - no files will actually be moved)" if params.simulate else ""
    if not args.yes and not ask_yes_no(f"Move them back to their original folders?{dry_note}"):
        print("Aborted.")
        return 0

    report = engine.run(params, plan)

    run_id = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    run_file = RunLogger(ensure_dir(cfg.log_dir)).write_run(run_id, report)
    run_id = run_file.stem

    print(f"\nDone. Moved {len(report.moved)}, simulated {len(report.simulated)}, "
          f"skipped {len(report.skipped)}, failed {len(report.failed)}. Run ID: {run_id}")
    for r in report.failed:
        print(f"  FAILED {r.record.file_name} ({r.record.file_id}): {r.reason}")
    print(f"Report written to {run_file}")
    return 1 if report.failed else 0

if __name__ == "__main__":
    sys.exit(main())
