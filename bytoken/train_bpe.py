import argparse
import logging
from pathlib import Path

from .bpe import ByToken


def main(argv=None):
    ap = argparse.ArgumentParser(description="Train a BPE tokenizer on a text corpus")
    ap.add_argument("--text", required=True, help="corpus file (UTF-8)")
    ap.add_argument("--size", type=int, default=256, help="target vocabulary size")
    ap.add_argument("--out", required=True, help="where to write the tokenizer JSON")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    text = Path(args.text).read_text(encoding="utf-8")
    tok = ByToken()
    tok.train(text, vocab_size=args.size, verbose=args.verbose)
    Path(args.out).parent.mkdir(parents=True, exist_ok=True)
    tok.save(args.out)
    print(f"[tokenizer] saved to {args.out} (vocab={len(tok)}, merges={len(tok.merges)})")


if __name__ == "__main__":
    main()
