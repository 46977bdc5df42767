"""Train (or load) a tokenizer, time encode/decode, then check a save/load round trip."""

import argparse
import time
from pathlib import Path

from .bpe import ByToken

SAMPLE = "But on the edge of town, drills were driven out of his mind by something else."
CHECK = "hello from the loaded tokenizer"


def run(text, size, iterations, out, sample=SAMPLE, verbose=True, load=None):
    if load is not None:
        tok = ByToken.load(load)
        train_s = 0.0
        print(f"[tokenizer] loaded {load} (vocab={len(tok)})")
    else:
        print(f"Corpus size: {len(text)} characters")
        tok = ByToken()
        t0 = time.perf_counter()
        tok.train(text, vocab_size=size, verbose=verbose)
        train_s = time.perf_counter() - t0
        print(f"Training completed in {train_s:.3f}s")

    t0 = time.perf_counter()
    for _ in range(iterations):
        tok.decode(tok.encode(sample))
    bench_s = time.perf_counter() - t0
    print(f"{iterations} encode/decode round trips in {bench_s:.3f}s")

    Path(out).parent.mkdir(parents=True, exist_ok=True)
    tok.save(out)
    loaded = ByToken.load(out)
    if loaded.encode(CHECK) != tok.encode(CHECK) or loaded.encode(sample) != tok.encode(sample):
        raise RuntimeError(f"tokenizer reloaded from {out} encodes differently")
    print(f"[tokenizer] {out} reloads with identical encodings")
    return {"train_s": train_s, "bench_s": bench_s, "vocab": len(tok)}


def main(argv=None):
    ap = argparse.ArgumentParser(description="Benchmark BPE training and encode/decode")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", help="corpus to train on")
    src.add_argument("--load", help="saved tokenizer to benchmark instead of training")
    ap.add_argument("--size", type=int, default=256)
    ap.add_argument("--iterations", type=int, default=50000)
    ap.add_argument("--sample", default=SAMPLE)
    ap.add_argument("--out", default="enc_trial.json")
    ap.add_argument("--quiet", action="store_true", help="no training progress output")
    args = ap.parse_args(argv)

    text = Path(args.text).read_text(encoding="utf-8") if args.text else None
    run(text, args.size, args.iterations, args.out, sample=args.sample,
        verbose=not args.quiet, load=args.load)


if __name__ == "__main__":
    main()
