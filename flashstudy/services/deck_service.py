# flashstudy/services/deck_service.py
from typing import Iterable, List, Tuple

from flashstudy.core.log_manager import logger
from flashstudy.exceptions import EmptyDeck
from flashstudy.models import Card, Deck
from flashstudy.services.csv_parser import parse_document
from flashstudy.services.source_service import TextSource, read_documents


def build_deck(documents: Iterable[Tuple[str, str]]) -> Deck:
    """
    Merges (path, raw text) pairs into one canonical Deck.

    The input order is irrelevant: each document is parsed on its own and
    the concatenation is sorted by (path case-insensitive, row index).
    Raises EmptyDeck when no document yields a single valid card.
    """
    documents = list(documents)
    cards: List[Card] = []
    for path, text in documents:
        cards.extend(parse_document(text, path))

    if not cards:
        logger.warning(f"No valid cards found in {len(documents)} document(s).")
        raise EmptyDeck(len(documents))

    deck = Deck(cards)
    logger.info(f"Built deck: {len(deck)} cards from {len(deck.paths)} of {len(documents)} document(s).")
    return deck


async def load_deck(source: TextSource) -> Deck:
    """Reads every document of `source` concurrently, then builds the deck."""
    documents = await read_documents(source)
    return build_deck(documents)
