# flashstudy/services/scope_service.py
from typing import Dict, List

from flashstudy.core.log_manager import logger
from flashstudy.models import Card, Deck, sort_paths
from flashstudy.schemas import ALL_SCOPE


def derive_folders(deck: Deck) -> List[str]:
    """Every ancestor directory of every card path, e.g. 'a' and 'a/b' for 'a/b/c.csv'."""
    folders = set()
    for path in deck.paths:
        parts = [p for p in path.split("/")[:-1] if p]
        for depth in range(1, len(parts) + 1):
            folders.add("/".join(parts[:depth]))
    return sort_paths(folders)


def derive_files(deck: Deck) -> List[str]:
    return deck.paths


def select_scope(deck: Deck, key: str) -> List[Card]:
    """
    Projects the subset of `deck` named by `key`, in canonical order.
    An unknown key yields an empty subset rather than an error.
    """
    if key == ALL_SCOPE:
        return list(deck.cards)

    if key in derive_folders(deck):
        prefix = key + "/"
        return [c for c in deck.cards if c.path.startswith(prefix)]

    if key in derive_files(deck):
        return [c for c in deck.cards if c.path == key]

    logger.warning(f"Unknown scope '{key}'; selecting no cards.")
    return []


def scope_options(deck: Deck) -> Dict[str, str]:
    """
    Selectable scopes mapped to display labels, ready for a select widget.
    """
    options = {ALL_SCOPE: f"All cards ({len(deck)})"}
    for folder in derive_folders(deck):
        count = len(select_scope(deck, folder))
        options[folder] = f"📁 {folder}/ ({count})"
    for path in derive_files(deck):
        count = len(select_scope(deck, path))
        options[path] = f"📄 {path} ({count})"
    return options
