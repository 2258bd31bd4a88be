# flashstudy/services/csv_parser.py
import re
from typing import List

from flashstudy.models import Card, make_card_id
from flashstudy.core.log_manager import logger

QUOTE = '"'
DELIMITER = ','
LINE_BREAK = re.compile(r"\r?\n")


def split_line(line: str) -> List[str]:
    """
    Tokenizes one line into fields.

    A comma outside quotes ends a field. A quote toggles quote-mode, except
    that two quotes inside quote-mode collapse to one literal quote.
    Unbalanced quotes are tolerated: they only switch the mode for the
    rest of the line.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


def _clean_field(value: str) -> str:
    """Trims whitespace and strips at most one layer of wrapping quotes."""
    value = value.strip()
    if len(value) >= 2 and value.startswith(QUOTE) and value.endswith(QUOTE):
        value = value[1:-1].strip()
    return value


def parse_document(text: str, path: str) -> List[Card]:
    """
    Turns one document into its ordered list of valid Cards.

    row_index is the position in the unfiltered line sequence, so ids stay
    stable when the same malformed rows are skipped on a later re-parse.
    """
    cards: List[Card] = []
    skipped = 0

    for row_index, line in enumerate(LINE_BREAK.split(text)):
        fields = split_line(line)
        if len(fields) < 2:
            skipped += 1
            continue

        front = _clean_field(fields[0])
        back = _clean_field(fields[1])
        if not front or not back:
            skipped += 1
            continue

        cards.append(Card(
            id=make_card_id(path, row_index),
            path=path,
            row_index=row_index,
            front=front,
            back=back,
        ))

    if skipped:
        logger.debug(f"Skipped {skipped} malformed or blank row(s) in '{path}'.")
    return cards
