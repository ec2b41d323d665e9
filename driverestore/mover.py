import logging

from .errors import MoveFailed, TransportError
from .interfaces import MoveTransport
from .models import Outcome, RestoreRecord

logger = logging.getLogger(__name__)

class ReverseMover:
    def __init__(self, transport: MoveTransport, dry_run: bool = True):
        self.transport = transport
        self.dry_run = dry_run

    def move_one(self, rec: RestoreRecord, current_parent: str) -> Outcome:
        """Put rec back in its origin folder with a single add+remove call."""
        if self.dry_run:
            logger.debug("[DRY RUN] would move %s from %s to %s",
                         rec.file_id, current_parent, rec.origin_folder_id)
            return Outcome.SIMULATED

        # never split into add-then-remove: an interruption in between would
        # leave the file with two parents
        try:
            self.transport.apply_move(rec.file_id, add_parent=rec.origin_folder_id,
                                      remove_parent=current_parent)
        except TransportError as e:
            raise MoveFailed(rec.file_id, e) from e
        return Outcome.MOVED
