"""Thin REST clients for the Admin SDK Reports API and the Drive v3 API.

Only the three calls the restore needs are implemented. Obtaining OAuth access
tokens is left to the caller (see config.py).
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from .errors import TransportError
from .models import FileSnapshot
from .utils import to_rfc3339

logger = logging.getLogger(__name__)

REPORTS_URL = "https://admin.googleapis.com/admin/reports/v1/activity/users/all/applications/drive"
DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
PAGE_SIZE = 1000

def make_session(token: str) -> requests.Session:
    session = requests.Session()
    session.headers.update({"Authorization": f"Bearer {token}", "Accept": "application/json"})
    return session

def _call(session: requests.Session, method: str, url: str, timeout: float, **kwargs) -> requests.Response:
    try:
        resp = session.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as e:
        raise TransportError(f"{method} {url} failed: {e}") from e
    return resp

def _json(resp: requests.Response) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError as e:
        raise TransportError(f"Unreadable response body (HTTP {resp.status_code}): {e}", status=resp.status_code) from e
    if not isinstance(data, dict):
        raise TransportError(f"Expected a JSON object, got {type(data).__name__}", status=resp.status_code)
    return data

def _raise_for_status(resp: requests.Response) -> None:
    if resp.status_code >= 400:
        try:
            message = resp.json().get("error", {}).get("message", resp.text)
        except (ValueError, AttributeError):
            message = resp.text
        raise TransportError(f"HTTP {resp.status_code}: {message}", status=resp.status_code)

class ReportsAuditSource:
    """Reads drive 'move' events from the admin audit log."""

    def __init__(self, session: requests.Session, timeout: float = 60.0):
        self.session = session
        self.timeout = timeout

    def fetch_moves(self, scope_folder_id: str, start: datetime, end: datetime,
                    actor_ip: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {
            "eventName": "move",
            "filters": f"destination_folder_id=={scope_folder_id}",
            "startTime": to_rfc3339(start),
            "endTime": to_rfc3339(end),
            "maxResults": PAGE_SIZE,
        }
        if actor_ip:
            params["actorIpAddress"] = actor_ip

        activities: List[Dict[str, Any]] = []
        page = 0
        while True:
            page += 1
            resp = _call(self.session, "GET", REPORTS_URL, self.timeout, params=params)
            _raise_for_status(resp)
            data = _json(resp)
            items = data.get("items") or []
            activities.extend(items)
            logger.debug("Audit page %d: %d activities", page, len(items))

            token = data.get("nextPageToken")
            if not token:
                break
            params["pageToken"] = token
        return activities

class DriveFiles:
    """File state lookups and reparenting on (shared) drives."""

    def __init__(self, session: requests.Session, timeout: float = 60.0):
        self.session = session
        self.timeout = timeout

    def fetch_state(self, file_id: str) -> FileSnapshot:
        resp = _call(self.session, "GET", f"{DRIVE_FILES_URL}/{file_id}", self.timeout, params={
            "fields": "id,name,parents,trashed",
            "supportsAllDrives": "true",
        })
        if resp.status_code == 404:
            return FileSnapshot(file_id=file_id, parent_ids=frozenset(), exists=False)
        _raise_for_status(resp)
        data = _json(resp)
        return FileSnapshot(
            file_id=data.get("id", file_id),
            parent_ids=frozenset(data.get("parents") or []),
            trashed=bool(data.get("trashed", False)),
            name=data.get("name", ""),
        )

    def apply_move(self, file_id: str, add_parent: str, remove_parent: str) -> None:
        resp = _call(self.session, "PATCH", f"{DRIVE_FILES_URL}/{file_id}", self.timeout, params={
            "addParents": add_parent,
            "removeParents": remove_parent,
            "supportsAllDrives": "true",
            "fields": "id,parents",
        }, json={})
        _raise_for_status(resp)
