# flashstudy/services/study_service.py
import random
from typing import List, Optional, Set, Union

from flashstudy.core.log_manager import logger
from flashstudy.models import Card, Deck
from flashstudy.schemas import ALL_SCOPE, DEFAULT_FONT_SIZE, Outcome, Progress
from flashstudy.services.scope_service import select_scope


def parse_font_size(value: Union[int, str, None]) -> int:
    """Integer pixel size of a raw font-size setting; 30 when unparsable."""
    if isinstance(value, bool):
        return DEFAULT_FONT_SIZE
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return DEFAULT_FONT_SIZE


class StudySession:
    """
    Study progress over one subset of a Deck.

    Every change goes through one of the transition methods below; nothing
    is recomputed implicitly. Invariants after each transition:
    incorrect_ids is a subset of session_ids, and while not finished
    current_index lies in [0, len(session_ids) - 1].
    """

    def __init__(
        self,
        deck: Deck,
        scope: str = ALL_SCOPE,
        font_size: Union[int, str] = DEFAULT_FONT_SIZE,
        rng: Optional[random.Random] = None,
    ):
        self.deck = deck
        self.rng = rng or random.Random()
        self.font_size: Union[int, str] = font_size
        self.front_first: bool = True
        self.flipped: bool = False

        # Assigned by _rebuild
        self.scope: str = scope
        self.session_ids: List[str] = []
        self.original_order: List[str] = []
        self.current_order: List[str] = []
        self.current_index: int = 0
        self.incorrect_ids: Set[str] = set()
        self.is_shuffled: bool = False
        self.finished: bool = False

        self._rebuild(scope, [c.id for c in select_scope(deck, scope)])

    @classmethod
    def restore(
        cls,
        deck: Deck,
        *,
        scope: str,
        session_ids: List[str],
        original_order: List[str],
        current_order: List[str],
        incorrect_ids: Set[str],
        current_index: int = 0,
        is_shuffled: bool = False,
        front_first: bool = True,
        font_size: Union[int, str] = DEFAULT_FONT_SIZE,
        finished: bool = False,
        rng: Optional[random.Random] = None,
    ) -> "StudySession":
        """
        Rehydrates a session from saved fields. Ids unknown to `deck` are
        dropped and the cursor is clamped so the invariants hold.
        """
        session = cls.__new__(cls)
        session.deck = deck
        session.rng = rng or random.Random()
        session.font_size = font_size
        session.front_first = front_first
        session.flipped = False
        session.scope = scope

        session.session_ids = [cid for cid in session_ids if cid in deck]
        members = set(session.session_ids)
        session.original_order = [cid for cid in original_order if cid in members]
        session.current_order = [cid for cid in current_order if cid in members]
        session.incorrect_ids = {cid for cid in incorrect_ids if cid in members}
        session.is_shuffled = is_shuffled
        session.finished = finished and bool(session.current_order)

        last_index = max(len(session.current_order) - 1, 0)
        session.current_index = min(max(current_index, 0), last_index)
        return session

    # --- SESSION LIFECYCLE (Set/Reset) ---

    def _rebuild(self, scope: str, card_ids: List[str]):
        """Replaces the whole session with `card_ids` in canonical order."""
        self.scope = scope
        self.session_ids = list(card_ids)
        self.original_order = list(card_ids)
        self.current_order = list(card_ids)
        self.current_index = 0
        self.incorrect_ids = set()
        self.is_shuffled = False
        self.finished = False
        self.front_first = True
        self.flipped = False
        logger.info(f"Session initialized: scope='{scope}', {len(card_ids)} card(s).")

    def change_scope(self, scope: str):
        self._rebuild(scope, [c.id for c in select_scope(self.deck, scope)])

    def restart_full_deck(self):
        self._rebuild(ALL_SCOPE, self.deck.ids)

    def review_wrong_only(self) -> bool:
        """
        Starts a new session over exactly the cards marked wrong, in deck
        order. Only valid once finished with at least one wrong card.
        Returns whether the session was rebuilt.
        """
        if not self.finished or not self.incorrect_ids:
            logger.warning("Review of wrong cards requested with nothing to review; ignoring.")
            return False
        self._rebuild(self.scope, self.deck.canonical(self.incorrect_ids))
        return True

    # --- STATE MUTATION (Gameplay Updates) ---

    def answer(self, outcome: Union[Outcome, str]):
        """Records the outcome for the current card and advances."""
        outcome = Outcome(outcome)
        card_id = self.current_card_id
        if self.finished or card_id is None:
            logger.warning("Answer submitted with no current card; ignoring.")
            return

        if outcome is Outcome.INCORRECT:
            self.incorrect_ids.add(card_id)

        if self.current_index >= len(self.current_order) - 1:
            self.finished = True
        else:
            self.current_index += 1
            self.flipped = False

    def mark_correct(self):
        self.answer(Outcome.CORRECT)

    def mark_wrong(self):
        self.answer(Outcome.INCORRECT)

    def undo(self) -> bool:
        """
        Steps back one card and clears any wrong-mark on the card returned
        to, whether or not it was marked. Returns whether a step was taken.
        """
        if self.current_index <= 0:
            return False
        self.current_index -= 1
        self.incorrect_ids.discard(self.current_order[self.current_index])
        self.finished = False
        self.flipped = False
        return True

    def toggle_shuffle(self):
        """
        Binary toggle: shuffles the session (Fisher-Yates) or restores the
        original order. Both branches restart at the first card.
        """
        if not self.is_shuffled:
            shuffled = list(self.original_order)
            self.rng.shuffle(shuffled)
            self.current_order = shuffled
            self.is_shuffled = True
        else:
            self.current_order = list(self.original_order)
            self.is_shuffled = False
        self.current_index = 0
        self.flipped = False

    def flip(self):
        self.flipped = not self.flipped

    # --- SETTINGS ---

    def set_front_first(self, front_first: bool):
        self.front_first = bool(front_first)

    def set_font_size(self, value: Union[int, str]):
        if isinstance(value, str):
            value = value.strip().lstrip("0")
        self.font_size = value

    @property
    def font_size_px(self) -> int:
        return parse_font_size(self.font_size)

    # --- VIEW ---

    @property
    def total(self) -> int:
        return len(self.session_ids)

    @property
    def is_review(self) -> bool:
        """True when the session holds only part of its scope, as after a wrong-card review."""
        return self.session_ids != [c.id for c in select_scope(self.deck, self.scope)]

    @property
    def current_card_id(self) -> Optional[str]:
        if 0 <= self.current_index < len(self.current_order):
            return self.current_order[self.current_index]
        return None

    @property
    def current_card(self) -> Optional[Card]:
        card_id = self.current_card_id
        return self.deck.get(card_id) if card_id else None

    @property
    def showing_front(self) -> bool:
        return self.front_first != self.flipped

    @property
    def displayed_text(self) -> str:
        card = self.current_card
        if card is None:
            return ""
        return card.front if self.showing_front else card.back

    @property
    def answered_count(self) -> int:
        return self.total if self.finished else self.current_index

    @property
    def wrong_count(self) -> int:
        return len(self.incorrect_ids)

    @property
    def correct_count(self) -> int:
        return max(0, self.answered_count - self.wrong_count)

    def progress(self) -> Progress:
        return {
            "answered": self.answered_count,
            "correct": self.correct_count,
            "wrong": self.wrong_count,
            "total": self.total,
        }
