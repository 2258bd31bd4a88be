# flashstudy/services/workspace_service.py
import random
from typing import List, Optional, Union

from flashstudy.core.log_manager import logger
from flashstudy.exceptions import CorruptSnapshot, FlashstudyError
from flashstudy.models import Deck
from flashstudy.schemas import ALL_SCOPE, DEFAULT_FONT_SIZE, SnapshotDTO
from flashstudy.services import snapshot_service
from flashstudy.services.deck_service import load_deck
from flashstudy.services.source_service import TextSource
from flashstudy.services.storage_service import PersistentStore
from flashstudy.services.study_service import StudySession


class StudyWorkspace:
    """
    Holds the current Deck, its StudySession and an optional snapshot
    waiting for its files. Every operation validates fully before it
    replaces anything, so a failure leaves the workspace as it was.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng
        self.deck: Optional[Deck] = None
        self.session: Optional[StudySession] = None
        self.pending: Optional[SnapshotDTO] = None

    @property
    def has_deck(self) -> bool:
        return self.deck is not None and self.session is not None

    @property
    def expected_paths(self) -> List[str]:
        """Files the pending snapshot needs; empty when nothing is pending."""
        if self.pending is None:
            return []
        return snapshot_service.expected_paths(self.pending)

    # --- UPLOAD ---

    async def upload(self, source: TextSource) -> StudySession:
        """
        Builds a deck from `source` and starts a session on it. With a
        pending snapshot the deck must match it, and the saved session is
        restored instead of starting fresh.
        """
        deck = await load_deck(source)
        return self.adopt(deck)

    def adopt(self, deck: Deck) -> StudySession:
        if self.pending is not None:
            session = snapshot_service.decode(self.pending, deck, rng=self.rng)
            self.pending = None
            logger.info("Pending snapshot applied to the uploaded files.")
        else:
            font_size = self.session.font_size if self.session else DEFAULT_FONT_SIZE
            session = StudySession(deck, ALL_SCOPE, font_size=font_size, rng=self.rng)

        self.deck = deck
        self.session = session
        return session

    # --- SNAPSHOTS ---

    def load_snapshot(self, payload: Union[bytes, str]) -> List[str]:
        """
        Parses `payload` and keeps it until matching files are uploaded.
        Returns the paths the upload must consist of.
        """
        snapshot = snapshot_service.loads(payload)
        self.pending = snapshot
        logger.info(f"Snapshot pending; expecting {len(snapshot.paths)} file(s).")
        return self.expected_paths

    def import_snapshot(self, payload: Union[bytes, str]) -> Optional[StudySession]:
        """
        Restores `payload` onto the loaded deck. Without a deck the
        snapshot becomes pending and None is returned.
        """
        if self.deck is None:
            self.load_snapshot(payload)
            return None
        snapshot = snapshot_service.loads(payload)
        self.session = snapshot_service.decode(snapshot, self.deck, rng=self.rng)
        return self.session

    def export_snapshot(self) -> bytes:
        if not self.has_deck:
            raise FlashstudyError("Nothing to export: no deck is loaded.")
        return snapshot_service.dumps(snapshot_service.encode(self.session, self.deck))

    def clear_pending(self):
        self.pending = None

    def reset(self):
        """Back to the upload step; the next upload starts from scratch."""
        self.deck = None
        self.session = None
        self.pending = None

    # --- PERSISTENT STORE ---

    def save(self, store: PersistentStore, key: str):
        store.put(key, self.export_snapshot())

    def restore(self, store: PersistentStore, key: str) -> Optional[StudySession]:
        payload = store.get(key)
        if payload is None:
            raise CorruptSnapshot(f"nothing saved under '{key}'")
        return self.import_snapshot(payload)
