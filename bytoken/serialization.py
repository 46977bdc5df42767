"""Saved tokenizer document: build it from a trained state and read it back.

Layout (written and read through the same paths)::

    {
      "config": {"vocab_size": int, "max_key": int},
      "model": {
        "vocab": {"stoi": {...}, "itos": {...}, "final_vocab": [[str, int], ...]},
        "merges": {"<left>,<right>": int, ...}
      }
    }
"""

from __future__ import annotations

import re
from typing import Any, Dict, Tuple

from .config import BPEConfig
from .errors import SchemaError
from .vocab import UNK_ID, UNK_TOKEN, Vocabulary

Pair = Tuple[int, int]

_ID = r"(0|[1-9][0-9]*)"
_ID_KEY = re.compile(_ID)
_MERGE_KEY = re.compile(_ID + "," + _ID)


def merge_key(pair: Pair) -> str:
    return f"{pair[0]},{pair[1]}"


def parse_merge_key(key: str) -> Pair:
    m = _MERGE_KEY.fullmatch(key) if isinstance(key, str) else None
    if m is None:
        raise SchemaError(f"malformed merge key {key!r}; expected '<left>,<right>'")
    return int(m.group(1)), int(m.group(2))


def to_document(config: BPEConfig, vocab: Vocabulary, merges: Dict[Pair, int]) -> Dict[str, Any]:
    return {
        "config": config.to_dict(),
        "model": {
            "vocab": {
                "stoi": vocab.stoi,
                "itos": {str(i): s for i, s in sorted(vocab.itos.items())},
                "final_vocab": [[s, i] for s, i in vocab.lookup],
            },
            "merges": {merge_key(p): t for p, t in sorted(merges.items(), key=lambda kv: kv[1])},
        },
    }


def _field(obj, key, kind, where):
    if not isinstance(obj, dict) or key not in obj:
        raise SchemaError(f"missing field '{where}{key}'")
    value = obj[key]
    if not _is(value, kind):
        raise SchemaError(f"field '{where}{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


def _is(value, kind) -> bool:
    # bool is an int subclass but never a valid id or size
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, kind)


def _parse_itos(raw: Dict[str, Any]) -> Dict[int, str]:
    itos = {}
    for k, v in raw.items():
        if not (isinstance(k, str) and _ID_KEY.fullmatch(k)):
            raise SchemaError(f"itos key {k!r} is not a non-negative integer")
        if not isinstance(v, str):
            raise SchemaError(f"itos[{k}] must be a string")
        itos[int(k)] = v
    return itos


def from_document(doc: Any) -> Tuple[BPEConfig, Vocabulary, Dict[Pair, int]]:
    """Validate ``doc`` and rebuild ``(config, vocabulary, merges)`` from it."""
    if not isinstance(doc, dict):
        raise SchemaError("tokenizer document must be a JSON object")

    cfg = _field(doc, "config", dict, "")
    config = BPEConfig(
        vocab_size=_field(cfg, "vocab_size", int, "config."),
        max_key=_field(cfg, "max_key", int, "config."),
    )
    model = _field(doc, "model", dict, "")
    raw_vocab = _field(model, "vocab", dict, "model.")
    raw_stoi = _field(raw_vocab, "stoi", dict, "model.vocab.")
    raw_itos = _field(raw_vocab, "itos", dict, "model.vocab.")
    raw_final = _field(raw_vocab, "final_vocab", list, "model.vocab.")
    raw_merges = _field(model, "merges", dict, "model.")

    itos = _parse_itos(raw_itos)
    if itos and sorted(itos) != list(range(len(itos))):
        raise SchemaError("itos ids must be contiguous from 0")
    if itos and itos.get(UNK_ID) != UNK_TOKEN:
        raise SchemaError(f"id {UNK_ID} must be bound to {UNK_TOKEN!r}")
    if config.max_key != len(itos):
        raise SchemaError(f"config.max_key ({config.max_key}) does not match itos size ({len(itos)})")
    if len(itos) > config.vocab_size:
        raise SchemaError(f"itos size ({len(itos)}) exceeds config.vocab_size ({config.vocab_size})")

    vocab = Vocabulary(itos)
    stoi = {}
    for s, i in raw_stoi.items():
        if not _is(i, int):
            raise SchemaError(f"stoi[{s!r}] must be an integer")
        stoi[s] = i
    if stoi != vocab.stoi:
        raise SchemaError("stoi is not consistent with itos")

    final = []
    for entry in raw_final:
        if not (isinstance(entry, list) and len(entry) == 2
                and isinstance(entry[0], str) and _is(entry[1], int)):
            raise SchemaError(f"final_vocab entry {entry!r} must be [string, int]")
        final.append((entry[0], entry[1]))
    if sorted(final) != sorted(vocab.lookup):
        raise SchemaError("final_vocab does not match stoi")

    merges: Dict[Pair, int] = {}
    for key, target in raw_merges.items():
        left, right = parse_merge_key(key)
        if not _is(target, int):
            raise SchemaError(f"merge target for {key!r} must be an integer")
        if target not in itos or left not in itos or right not in itos:
            raise SchemaError(f"merge {key!r} -> {target} references an unknown id")
        if target <= left or target <= right:
            raise SchemaError(f"merge {key!r} -> {target} must produce a newer id")
        if itos[target] != itos[left] + itos[right]:
            raise SchemaError(f"merge {key!r} -> {target} does not concatenate its operands")
        merges[(left, right)] = target

    return config, vocab, merges
