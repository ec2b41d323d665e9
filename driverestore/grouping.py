from typing import Dict, List

from .models import FolderGroup, RestoreRecord

class FolderGrouper:
    """Buckets restore records by origin folder, keeping first-seen order."""

    def group(self, records: List[RestoreRecord]) -> List[FolderGroup]:
        buckets: Dict[str, List[RestoreRecord]] = {}
        for rec in records:
            buckets.setdefault(rec.origin_folder_id, []).append(rec)

        # dicts keep insertion order, so groups come out in first-seen order
        return [
            FolderGroup(
                origin_folder_id=folder_id,
                origin_folder_name=recs[0].origin_folder_name,
                records=tuple(recs),
            )
            for folder_id, recs in buckets.items()
        ]

def group_by_origin(records: List[RestoreRecord]) -> List[FolderGroup]:
    return FolderGrouper().group(records)
