import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from .models import Outcome, RecordResult

CSV_HEADER = ["run_id", "file_id", "file_name", "origin_folder_id", "origin_folder_name",
              "outcome", "reason", "timestamp"]

class RunLogger:
    """Append-only ledger of record outcomes. Also writes a JSON report per run."""
    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.root / "runs.csv"

        if not self.csv_path.exists():
            with self.csv_path.open("w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow(CSV_HEADER)

    def unique_run_id(self, run_id: str) -> str:
        """run_id, or run_id-1, run_id-2, ... if a report with that id already exists."""
        candidate = run_id
        i = 1
        while (self.root / f"{candidate}.json").exists():
            candidate = f"{run_id}-{i}"
            i += 1
        return candidate

    def write_run(self, run_id: str, report) -> Path:
        """Persist a RunReport; returns the path of the JSON report.

        The id is suffixed when it is already taken, so the report file stem is
        the id actually used.
        """
        run_id = self.unique_run_id(run_id)
        now = datetime.now().isoformat()
        with self.csv_path.open("a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            for r in report.results:
                writer.writerow([
                    run_id,
                    r.record.file_id,
                    r.record.file_name,
                    r.record.origin_folder_id,
                    r.record.origin_folder_name,
                    r.outcome.value,
                    r.reason,
                    now,
                ])

        params = report.params
        data = {
            "run_id": run_id,
            "written_at": now,
            "params": {
                "scope_folder_id": params.scope_folder_id,
                "start": params.start.isoformat(),
                "end": params.end.isoformat(),
                "actor_ip": params.actor_ip,
                "simulate": params.simulate,
            },
            "stats": report.stats.as_dict() if report.stats else {},
            "results": [_result_to_dict(r) for r in report.results],
            "malformed": [{"index": m.index, "reason": m.reason} for m in report.malformed],
        }
        run_file = self.root / f"{run_id}.json"
        run_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return run_file

    def list_runs(self) -> List[str]:
        """Return run ids sorted newest→oldest."""
        ids = []
        with self.csv_path.open("r", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                ids.append(row["run_id"])
        ids.extend(p.stem for p in self.root.glob("*.json"))
        return sorted(set(ids), reverse=True)

    def load_run(self, run_id: str) -> Dict[str, Any]:
        path = self.root / f"{run_id}.json"
        if not path.exists():
            return {}
        data = json.loads(path.read_text(encoding="utf-8"))
        for item in data.get("results", []):
            item["outcome"] = Outcome(item["outcome"])
        return data

def _result_to_dict(r: RecordResult) -> Dict[str, Any]:
    return {
        "file_id": r.record.file_id,
        "file_name": r.record.file_name,
        "origin_folder_id": r.record.origin_folder_id,
        "origin_folder_name": r.record.origin_folder_name,
        "outcome": r.outcome.value,
        "reason": r.reason,
        "parents_seen": sorted(r.parent_ids),
        "percent": r.percent,
    }
