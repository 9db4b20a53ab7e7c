import os
import random
import tempfile

import pytest

# The app creates its tables at import time; point it at a throwaway database first.
_db_dir = tempfile.mkdtemp(prefix="blackjack-tests-")
os.environ["BLACKJACK_DATABASE_URL"] = "sqlite:///" + os.path.join(_db_dir, "test.db")

from game import Shoe  # noqa: E402


class ScriptedShoe(Shoe):
    """A shoe whose draws follow a fixed list of ranks, then run dry."""

    def __init__(self, cards, num_decks=6, counts=None):
        super().__init__(num_decks=num_decks, counts=counts)
        self.script = list(cards)

    def copy(self):
        clone = ScriptedShoe([], num_decks=self.num_decks, counts=self.counts)
        clone.script = self.script
        return clone

    def draw(self, rng):
        if not self.script:
            return None
        return self.script.pop(0)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scripted_shoe():
    return ScriptedShoe
