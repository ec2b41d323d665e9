"""Turns raw audit activities into RestoreRecord objects.

A Reports API "move" activity looks like::

    {"events": [{"name": "move", "parameters": [
        {"name": "doc_id", "value": "1abc"},
        {"name": "doc_title", "value": "budget.xlsx"},
        {"name": "source_folder_id", "multiValue": ["0Fxyz"]},
        {"name": "source_folder_title", "multiValue": ["Finance"]},
        ...]}]}

Each required parameter must resolve to exactly one value.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import MalformedAuditEvent
from .models import MalformedEvent, RestoreRecord

logger = logging.getLogger(__name__)

SOURCE_FOLDER_ID = "source_folder_id"
SOURCE_FOLDER_TITLE = "source_folder_title"
DOC_ID = "doc_id"
DOC_TITLE = "doc_title"

@dataclass(frozen=True)
class Extraction:
    """Either exactly one value or the name of what went wrong."""
    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        if self.error is not None:
            raise MalformedAuditEvent(self.error)
        return self.value

def single_value(parameters: List[Dict[str, Any]], name: str, multi: bool) -> Extraction:
    if not isinstance(parameters, list):
        return Extraction(error="event parameters are not a list")
    if any(not isinstance(p, dict) for p in parameters):
        return Extraction(error="event parameters hold a non-object entry")

    matches = [p for p in parameters if p.get("name") == name]
    if not matches:
        return Extraction(error=f"missing parameter '{name}'")
    if len(matches) > 1:
        return Extraction(error=f"parameter '{name}' appears {len(matches)} times")

    param = matches[0]
    if multi:
        values = param.get("multiValue")
        if values is None:
            values = []
        elif not isinstance(values, list):
            return Extraction(error=f"parameter '{name}' multiValue is not a list")
    else:
        values = [param["value"]] if param.get("value") is not None else []
    if len(values) != 1:
        return Extraction(error=f"parameter '{name}' has {len(values)} values, expected 1")
    if not isinstance(values[0], str):
        return Extraction(error=f"parameter '{name}' value is not a string")
    if not values[0]:
        return Extraction(error=f"parameter '{name}' is empty")
    return Extraction(value=values[0])

def parse_activity(activity: Dict[str, Any]) -> RestoreRecord:
    """Build a RestoreRecord from one audit activity, or raise MalformedAuditEvent."""
    if not isinstance(activity, dict):
        raise MalformedAuditEvent("activity is not an object")
    events = activity.get("events") or []
    if not isinstance(events, list) or not events:
        raise MalformedAuditEvent("activity has no events")
    if not isinstance(events[0], dict):
        raise MalformedAuditEvent("first event is not an object")
    parameters = events[0].get("parameters") or []

    folder_id = single_value(parameters, SOURCE_FOLDER_ID, multi=True).unwrap()
    folder_name = single_value(parameters, SOURCE_FOLDER_TITLE, multi=True).unwrap()
    file_id = single_value(parameters, DOC_ID, multi=False).unwrap()
    file_name = single_value(parameters, DOC_TITLE, multi=False).unwrap()
    return RestoreRecord(
        file_id=file_id,
        file_name=file_name,
        origin_folder_id=folder_id,
        origin_folder_name=folder_name,
    )

def parse_activities(activities: Iterable[Dict[str, Any]]) -> Tuple[List[RestoreRecord], List[MalformedEvent]]:
    records: List[RestoreRecord] = []
    malformed: List[MalformedEvent] = []
    for i, activity in enumerate(activities):
        try:
            records.append(parse_activity(activity))
        except MalformedAuditEvent as e:
            logger.warning("Skipping audit event #%d: %s", i, e)
            malformed.append(MalformedEvent(index=i, reason=str(e), raw=activity))
    return records, malformed
