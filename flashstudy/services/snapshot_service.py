# flashstudy/services/snapshot_service.py
import json
from typing import List, Optional, Union
import random

from pydantic import ValidationError

from flashstudy.core.log_manager import logger
from flashstudy.exceptions import CorruptSnapshot, IncompatibleSnapshot
from flashstudy.models import Deck, sort_paths
from flashstudy.schemas import SnapshotDTO
from flashstudy.services.study_service import StudySession


def encode(session: StudySession, deck: Deck) -> SnapshotDTO:
    """
    Captures the session verbatim plus the identity (sorted-unique path
    set) of the full deck it was taken on.
    """
    snapshot = SnapshotDTO(
        paths=tuple(deck.paths),
        session_ids=tuple(session.session_ids),
        original_order=tuple(session.original_order),
        current_order=tuple(session.current_order),
        current_index=session.current_index,
        incorrect_ids=tuple(deck.canonical(session.incorrect_ids)),
        scope=session.scope,
        is_shuffled=session.is_shuffled,
        front_first=session.front_first,
        font_size=session.font_size,
        finished=session.finished,
    )
    logger.info(f"Encoded snapshot: {len(snapshot.session_ids)} card(s), index {snapshot.current_index}, scope '{snapshot.scope}'.")
    return snapshot


def expected_paths(snapshot: SnapshotDTO) -> List[str]:
    """The files a deck must be built from for `snapshot` to apply."""
    return sort_paths(snapshot.paths)


def validate(snapshot: SnapshotDTO, deck: Deck):
    """
    Raises IncompatibleSnapshot unless the deck's path set equals the
    snapshot's exactly, ignoring order.
    """
    wanted = set(snapshot.paths)
    present = set(deck.paths)
    if wanted == present:
        return

    missing = sort_paths(wanted - present)
    extra = sort_paths(present - wanted)
    logger.warning(f"Incompatible snapshot. Missing: {missing}; extra: {extra}")
    raise IncompatibleSnapshot(missing=missing, extra=extra)


def decode(snapshot: SnapshotDTO, deck: Deck, rng: Optional[random.Random] = None) -> StudySession:
    """
    Validates `snapshot` against `deck` and derives a new session from it.
    The snapshot itself is never modified.
    """
    validate(snapshot, deck)
    session = StudySession.restore(
        deck,
        scope=snapshot.scope,
        session_ids=list(snapshot.session_ids),
        original_order=list(snapshot.original_order),
        current_order=list(snapshot.current_order),
        incorrect_ids=set(snapshot.incorrect_ids),
        current_index=snapshot.current_index,
        is_shuffled=snapshot.is_shuffled,
        front_first=snapshot.front_first,
        font_size=snapshot.font_size,
        finished=snapshot.finished,
        rng=rng,
    )
    dropped = len(snapshot.session_ids) - len(session.session_ids)
    if dropped:
        logger.warning(f"Dropped {dropped} snapshot card id(s) no longer present in the deck.")
    logger.info(f"Restored session: {session.total} card(s), index {session.current_index}.")
    return session


# --- WIRE FORMAT ---

def dumps(snapshot: SnapshotDTO) -> bytes:
    """Human-readable, uncompressed JSON payload."""
    return snapshot.model_dump_json(by_alias=True, indent=2).encode("utf-8")


def loads(payload: Union[bytes, str]) -> SnapshotDTO:
    """
    Parses an exported payload.
    Raises CorruptSnapshot on invalid JSON or a missing/invalid field.
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptSnapshot("invalid JSON", e)

    if not isinstance(data, dict):
        raise CorruptSnapshot("root must be a JSON object")

    try:
        return SnapshotDTO.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise CorruptSnapshot(f"invalid or missing field(s): {', '.join(fields)}", e)
