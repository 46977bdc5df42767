from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from .config import BPEConfig
from .errors import ConfigurationError, SchemaError
from .serialization import from_document, to_document
from .vocab import INVALID_TOKEN, UNK_ID, UNK_TOKEN, Vocabulary, pack_pair, unpack_pair

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]

MILESTONES = (10, 30, 50, 70, 90, 100)


class ByToken:
    """
    Character-level BPE tokenizer.

    - ``train`` seeds one token per distinct character (after ``<UNK>`` at id 0)
      and merges the most frequent adjacent pair until ``vocab_size`` is reached.
      Equally frequent pairs are broken by the smallest ``(left, right)``.
    - ``encode`` is greedy longest match over the vocabulary; unmatched
      characters become ``<UNK>``.
    - ``decode`` concatenates token strings; unknown ids render as ``<INVALID_ID>``.
    """

    def __init__(self, vocab: Optional[Vocabulary] = None,
                 merges: Optional[Dict[Pair, int]] = None,
                 config: Optional[BPEConfig] = None):
        self._vocab = vocab if vocab is not None else Vocabulary.empty()
        self._merges = dict(merges or {})
        self.config = config or BPEConfig(vocab_size=len(self._vocab), max_key=len(self._vocab))

    # ------------- Accessors -------------

    @property
    def vocab(self) -> Vocabulary:
        return self._vocab

    @property
    def merges(self) -> Dict[Pair, int]:
        return dict(self._merges)

    @property
    def vocab_size(self) -> int:
        return self.config.vocab_size

    @property
    def is_trained(self) -> bool:
        return len(self._vocab) > 0

    def __len__(self):
        return len(self._vocab)

    def token_to_id(self, token: str) -> Optional[int]:
        return self._vocab.token_to_id(token)

    def id_to_token(self, idx: int) -> Optional[str]:
        return self._vocab.id_to_token(idx)

    # ------------- Training -------------

    @staticmethod
    def _best_pair(seq: np.ndarray) -> Optional[Tuple[Pair, int]]:
        """Most frequent adjacent pair and its count; ties go to the smallest pair."""
        if seq.size < 2:
            return None
        keys = pack_pair(seq[:-1], seq[1:])
        uniq, counts = np.unique(keys, return_counts=True)
        # uniq is ascending and argmax takes the first maximum
        best = int(np.argmax(counts))
        return unpack_pair(int(uniq[best])), int(counts[best])

    @staticmethod
    def _merge(seq: np.ndarray, pair: Pair, new_id: int) -> np.ndarray:
        """Replace non-overlapping occurrences of ``pair``, scanning left to right."""
        left, right = pair
        hits = np.flatnonzero((seq[:-1] == left) & (seq[1:] == right))
        if left == right and hits.size > 1:
            # inside a run of ``left`` a sequential scan takes every other position
            starts = np.ones(hits.size, dtype=bool)
            starts[1:] = np.diff(hits) != 1
            pos = np.arange(hits.size)
            run_start = np.maximum.accumulate(np.where(starts, pos, 0))
            hits = hits[(pos - run_start) % 2 == 0]
        out = seq.copy()
        out[hits] = new_id
        keep = np.ones(seq.size, dtype=bool)
        keep[hits + 1] = False
        return out[keep]

    @staticmethod
    def _milestones(vocab_size: int) -> List[Tuple[int, int]]:
        return [(pct, math.ceil(vocab_size * pct / 100)) for pct in MILESTONES]

    def train(self, text: str, vocab_size: int = 256, verbose: bool = False) -> None:
        if self.is_trained:
            raise ConfigurationError("tokenizer is already trained; train a new ByToken instead")
        if isinstance(vocab_size, bool) or not isinstance(vocab_size, int):
            raise ConfigurationError(f"vocab_size must be an integer, got {vocab_size!r}")
        chars = set(text)
        if len(chars) + 1 > vocab_size:
            raise ConfigurationError(
                f"vocab_size ({vocab_size}) must be greater than or equal to the number of "
                f"unique chars ({len(chars)}) in the text corpus + 1 for {UNK_TOKEN!r}"
            )

        seed = Vocabulary.seed(chars)
        stoi = seed.stoi
        itos = seed.itos
        seq = np.fromiter((stoi[ch] for ch in text), dtype=np.int64, count=len(text))
        merges: Dict[Pair, int] = {}
        next_id = len(itos)
        milestones = self._milestones(vocab_size)

        with tqdm(total=vocab_size - next_id, desc="training", disable=not verbose) as bar:
            while next_id < vocab_size:
                found = self._best_pair(seq)
                if found is None:
                    break
                pair, count = found
                itos[next_id] = itos[pair[0]] + itos[pair[1]]
                merges[pair] = next_id
                seq = self._merge(seq, pair, next_id)
                logger.debug("merge %s -> %d %r (count=%d)", pair, next_id, itos[next_id], count)
                next_id += 1
                bar.update(1)
                if verbose:
                    for pct, mark in milestones:
                        if next_id == mark:
                            tqdm.write(f"Training progress {pct}%")

        self._vocab = Vocabulary(itos)
        self._merges = merges
        self.config = BPEConfig(vocab_size=vocab_size, max_key=next_id)
        logger.info("trained %d tokens (%d merges, %d chars)", len(self._vocab), len(merges), len(chars))
        if verbose:
            print(f"Tokenizer successfully trained! Final vocab size: {len(self._vocab)}")

    # ------------- Encoding -------------

    def encode(self, text: str) -> List[int]:
        ids = []
        pos = 0
        while pos < len(text):
            hit = self._vocab.match(text, pos)
            if hit is None:
                ids.append(UNK_ID)
                pos += 1
            else:
                piece, idx = hit
                ids.append(idx)
                pos += len(piece)
        return ids

    # ------------- Decoding -------------

    def decode(self, ids: Iterable[int]) -> str:
        itos = self._vocab.id_to_token
        return "".join(itos(i, INVALID_TOKEN) for i in ids)

    # ------------- Save / Load -------------

    def save(self, path) -> None:
        doc = to_document(self.config, self._vocab, self._merges)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)
        logger.debug("saved tokenizer (%d tokens) to %s", len(self._vocab), path)

    @classmethod
    def load(cls, path) -> "ByToken":
        with open(path, "r", encoding="utf-8") as f:
            try:
                doc = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise SchemaError(f"{Path(path)} is not a valid tokenizer file: {e}") from e
        config, vocab, merges = from_document(doc)
        logger.debug("loaded tokenizer (%d tokens, %d merges) from %s", len(vocab), len(merges), path)
        return cls(vocab=vocab, merges=merges, config=config)
