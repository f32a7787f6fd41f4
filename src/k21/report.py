from __future__ import annotations
import argparse, json, csv, glob, sys
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple

from loguru import logger

from . import settings
from .frequency import analyze
from .records import fragments_from_response, load_response
from .samples import SAMPLES, load_sample

logger = logger.bind(name="report")

SAMPLE_PREFIX = "sample:"

def _iter_inputs(paths: List[str]) -> List[str]:
    """Expand files/dirs/globs to a sorted, de-duplicated list of sources.

    `sample:N` entries pass through untouched so bundled examples can be
    analyzed without a file on disk.
    """
    files: List[str] = []
    samples: List[str] = []
    for p in paths:
        if p.startswith(SAMPLE_PREFIX):
            samples.append(p)
            continue
        P = Path(p)
        if P.is_file() and P.suffix.lower() == ".json":
            files.append(str(P))
        elif P.is_dir():
            files.extend(str(q) for q in sorted(P.rglob("*.json")))
        else:
            for q in glob.glob(p):
                if Path(q).is_file() and q.lower().endswith(".json"):
                    files.append(q)
    # de-dup & sort
    return sorted(set(samples)) + sorted(set(files))

def _load(source: str) -> Dict[str, Any]:
    if source.startswith(SAMPLE_PREFIX):
        try:
            number = int(source[len(SAMPLE_PREFIX):])
        except ValueError:
            raise KeyError(f"Unknown sample {source!r}; choose one of: {', '.join(str(n) for n in SAMPLES)}") from None
        return dict(load_sample(number))
    return dict(load_response(source))

def _rows(source: str, ranked: List[Tuple[str, int]]) -> List[Dict[str, Any]]:
    return [{"source": source, "rank": i, "word": w, "count": c} for i, (w, c) in enumerate(ranked, 1)]

def _print_table(source: str, ranked: List[Tuple[str, int]]) -> None:
    print(f"\n{source}")
    if not ranked:
        print("  (no words)")
        return
    width = max(len(w) for w, _ in ranked)
    for i, (w, c) in enumerate(ranked, 1):
        print(f"  {i:2d}. {w.ljust(width)}  {c}")

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="k21.report",
        description="Rank the most frequent OCR words in processing responses (JSON).",
    )
    ap.add_argument("inputs", nargs="+", help="Response files/dirs/globs, or sample:1 / sample:2")
    ap.add_argument("--top", type=int, default=None, help="How many words to keep (default K21_TOP_K or 10)")
    ap.add_argument("--combined", action="store_true", help="One table across all inputs instead of one per input")
    ap.add_argument("--out-csv", dest="out_csv", type=str, default=None,
                    help="Also write source,rank,word,count rows to this CSV")
    ap.add_argument("--json", action="store_true", help="Print results as JSON")
    args = ap.parse_args(argv)

    k = args.top if args.top is not None else settings.top_k()
    if k < 1:
        print("--top must be a positive integer", file=sys.stderr)
        return 2

    sources = _iter_inputs(args.inputs)
    if not sources:
        print("No JSON responses found.", file=sys.stderr)
        return 2

    loaded: List[Tuple[str, List[str]]] = []
    for src in sources:
        try:
            data = _load(src)
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Skipping {src}: {e}")
            continue
        loaded.append((src, fragments_from_response(data)))
    if not loaded:
        print("No readable JSON responses.", file=sys.stderr)
        return 2

    if args.combined:
        frags = [f for _, fr in loaded for f in fr]
        results = [("combined", analyze(frags, k))]
    else:
        results = [(src, analyze(fr, k)) for src, fr in loaded]

    if args.out_csv:
        outp = Path(args.out_csv)
        outp.parent.mkdir(parents=True, exist_ok=True)
        with outp.open("w", newline="", encoding="utf-8") as fo:
            w = csv.DictWriter(fo, fieldnames=["source", "rank", "word", "count"])
            w.writeheader()
            for src, ranked in results:
                w.writerows(_rows(src, ranked))
        logger.info(f"Wrote {sum(len(r) for _, r in results)} rows to {outp}")

    if args.json:
        print(json.dumps(
            [{"source": src, "top": [[w, c] for w, c in ranked]} for src, ranked in results],
            indent=2, ensure_ascii=False,
        ))
    else:
        for src, ranked in results:
            _print_table(src, ranked)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
