from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

UNK_TOKEN = "<UNK>"
UNK_ID = 0
INVALID_TOKEN = "<INVALID_ID>"

PAIR_SHIFT = 32
PAIR_MASK = (1 << PAIR_SHIFT) - 1


def pack_pair(left: int, right: int) -> int:
    """Pack an id pair into one integer that sorts like the tuple ``(left, right)``."""
    return (left << PAIR_SHIFT) | right


def unpack_pair(key: int) -> Tuple[int, int]:
    return key >> PAIR_SHIFT, key & PAIR_MASK


class Vocabulary:
    """
    Immutable id <-> string mapping plus the length-sorted lookup table.

    - ``itos`` holds every allocated id.
    - ``stoi`` maps each distinct string to the newest id carrying it (``<UNK>``
      always to id 0), so ``itos[stoi[s]] == s`` always holds.
    - ``lookup`` lists the ``stoi`` entries longest first, ties by ascending id.
    """

    def __init__(self, itos: Mapping[int, str]):
        self._itos: Dict[int, str] = dict(itos)
        self._stoi: Dict[str, int] = {}
        for i in sorted(self._itos):
            self._stoi[self._itos[i]] = i
        # a merge may spell out the marker; it still resolves to id 0
        if self._itos.get(UNK_ID) == UNK_TOKEN:
            self._stoi[UNK_TOKEN] = UNK_ID
        self._lookup: List[Tuple[str, int]] = sorted(
            self._stoi.items(), key=lambda kv: (-len(kv[0]), kv[1])
        )
        self._lengths = sorted({len(s) for s in self._stoi if s}, reverse=True)

    @classmethod
    def empty(cls) -> "Vocabulary":
        return cls({})

    @classmethod
    def seed(cls, chars: Iterable[str]) -> "Vocabulary":
        """``<UNK>`` at id 0, then one id per character in ascending order."""
        itos = {UNK_ID: UNK_TOKEN}
        for i, ch in enumerate(sorted(set(chars)), start=UNK_ID + 1):
            itos[i] = ch
        return cls(itos)

    @property
    def stoi(self) -> Dict[str, int]:
        return dict(self._stoi)

    @property
    def itos(self) -> Dict[int, str]:
        return dict(self._itos)

    @property
    def lookup(self) -> List[Tuple[str, int]]:
        return list(self._lookup)

    def __len__(self) -> int:
        return len(self._itos)

    def __contains__(self, token: str) -> bool:
        return token in self._stoi

    def token_to_id(self, token: str) -> Optional[int]:
        return self._stoi.get(token)

    def id_to_token(self, idx: int, default: Optional[str] = None) -> Optional[str]:
        return self._itos.get(idx, default)

    def match(self, text: str, pos: int) -> Optional[Tuple[str, int]]:
        """Longest entry that is a prefix of ``text[pos:]``, or ``None``.

        Same result as scanning ``lookup`` in order: entries of equal length are
        distinct strings, so at most one of them can match.
        """
        remaining = len(text) - pos
        for n in self._lengths:
            if n > remaining:
                continue
            piece = text[pos:pos + n]
            idx = self._stoi.get(piece)
            if idx is not None:
                return piece, idx
        return None
