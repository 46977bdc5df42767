import json

import pytest

from bytoken import ByToken

CORPUS = "aaabdaaabac"

# merges produced by CORPUS with room to spare; ids: <UNK>=0 a=1 b=2 c=3 d=4
CORPUS_MERGES = {
    (1, 1): 5,      # "aa"
    (1, 2): 6,      # "ab" wins the (5, 1) / (1, 2) tie
    (5, 6): 7,      # "aaab"
    (1, 3): 8,      # "ac"
    (4, 7): 9,      # "daaab"
    (7, 9): 10,     # "aaabdaaab"
    (10, 8): 11,    # "aaabdaaabac"
}

PROSE = (
    "It was the best of times, it was the worst of times, it was the age of wisdom, "
    "it was the age of foolishness, it was the epoch of belief, it was the epoch of "
    "incredulity, it was the season of Light, it was the season of Darkness.\n"
)


@pytest.fixture
def trained():
    tok = ByToken()
    tok.train(CORPUS, vocab_size=20)
    return tok


@pytest.fixture
def prose_tok():
    tok = ByToken()
    tok.train(PROSE, vocab_size=80)
    return tok


@pytest.fixture
def saved(tmp_path, trained):
    path = tmp_path / "tok.json"
    trained.save(path)
    return path


@pytest.fixture
def rewrite(saved):
    """Edit the saved document in place and return its path."""

    def _rewrite(edit):
        doc = json.loads(saved.read_text(encoding="utf-8"))
        edit(doc)
        saved.write_text(json.dumps(doc), encoding="utf-8")
        return saved

    return _rewrite
