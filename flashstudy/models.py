from typing import Optional, List, Iterable, Iterator, Dict, Tuple
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict
from sqlmodel import SQLModel, Field

ID_SEPARATOR = "::"


def make_card_id(path: str, row_index: int) -> str:
    """Stable across re-parses of an unmodified document."""
    return f"{path}{ID_SEPARATOR}{row_index}"


def path_sort_key(path: str) -> Tuple[str, str]:
    """
    Case-insensitive ascending, with the raw path as tiebreaker so that
    'A.csv' and 'a.csv' still sort deterministically.
    """
    return (path.casefold(), path)


def sort_paths(paths: Iterable[str]) -> List[str]:
    """Deduplicates and sorts paths in canonical order."""
    return sorted(set(paths), key=path_sort_key)


# --- 1. STATIC CONTENT (The Book) ---

class Card(BaseModel):
    """
    One term/definition pair from a single valid CSV row.
    front and back are never empty after trimming.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    path: str
    row_index: int
    front: str
    back: str

    def sort_key(self) -> Tuple[str, str, int]:
        return path_sort_key(self.path) + (self.row_index,)


class Deck:
    """
    The canonical ordered sequence of all Cards from all ingested documents,
    sorted by (path case-insensitive, row_index).
    """

    def __init__(self, cards: Iterable[Card]):
        self._cards: Tuple[Card, ...] = tuple(sorted(cards, key=Card.sort_key))
        self._by_id: Dict[str, Card] = {c.id: c for c in self._cards}
        self._position: Dict[str, int] = {c.id: i for i, c in enumerate(self._cards)}
        self._paths: List[str] = sort_paths(c.path for c in self._cards)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self._cards

    @property
    def ids(self) -> List[str]:
        return [c.id for c in self._cards]

    @property
    def paths(self) -> List[str]:
        """Sorted-unique path set: the deck's identity fingerprint."""
        return list(self._paths)

    def get(self, card_id: str) -> Optional[Card]:
        return self._by_id.get(card_id)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._by_id

    def canonical(self, card_ids: Iterable[str]) -> List[str]:
        """Known ids from `card_ids`, deduplicated, in deck order."""
        known = {cid for cid in card_ids if cid in self._position}
        return sorted(known, key=self._position.__getitem__)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"Deck(cards={len(self._cards)}, paths={len(self._paths)})"


# --- 2. SAVED PROGRESS (The Save File) ---

class StoredSnapshot(SQLModel, table=True):
    """
    Raw snapshot payloads kept by SqlStore, one row per key.
    """
    key: str = Field(primary_key=True)
    payload: bytes
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
