import os
import sys
import random

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flashstudy.database import make_engine, init_db
from flashstudy.services.deck_service import build_deck


SAMPLE_DOCUMENTS = [
    ("b/x.csv", "Largest planet,Jupiter\nRed planet,Mars\n"),
    ("a.csv", '"Capital of France","Paris"\r\nCapital of Italy,Rome\nfoo\n'),
    ("b/c/deep.csv", "H2O,Water\n"),
]


@pytest.fixture
def documents():
    return list(SAMPLE_DOCUMENTS)


@pytest.fixture
def deck(documents):
    return build_deck(documents)


@pytest.fixture
def small_deck():
    """Three cards in a single file: ids small.csv::0..2."""
    return build_deck([("small.csv", "q0,a0\nq1,a1\nq2,a2")])


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()
