from datetime import datetime, timezone
from pathlib import Path

from .errors import FatalSetupError
from .models import RunParams

TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H-%M-%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M")

def parse_timestamp(text: str) -> datetime:
    """Parse a user-supplied timestamp. Naive values are taken as local time."""
    text = text.strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Unrecognised timestamp: {text!r} (use YYYY-MM-DD HH:MM:SS)") from None

def to_rfc3339(moment: datetime) -> str:
    """UTC timestamp in the form the Reports API expects."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"

def validate_run_params(params: RunParams) -> None:
    if not params.scope_folder_id or not params.scope_folder_id.strip():
        raise FatalSetupError("A drive / scope folder id is required.")
    if params.start is None or params.end is None:
        raise FatalSetupError("Both ends of the move window are required.")
    if params.start.astimezone(timezone.utc) >= params.end.astimezone(timezone.utc):
        raise FatalSetupError(
            f"Move window is empty: start {params.start} is not before end {params.end}."
        )

def ensure_dir(path: Path) -> Path:
    """Return a resolved Path, creating the directory if needed."""
    p = Path(path).expanduser().resolve()
    p.mkdir(parents=True, exist_ok=True)
    return p
