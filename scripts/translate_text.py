#!/usr/bin/env python3
"""
Translate Latin text into Shavian using your own dictionary.

Only words already in shavian-dictionary.json are converted; everything else is
left as-is and reported on stderr. Capitalised words get the namer dot (·).

Usage:
  translate_text.py notes.txt > notes.shaw.txt
  echo "Hello friend." | translate_text.py
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "api"))

from batch_translate import UsageError, translate  # noqa: E402
from dictionary_store import DICTIONARY_FILENAME, DictionaryStore  # noqa: E402

DEFAULT_DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT / "api" / "data")))


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Translate Latin text to Shavian with your dictionary")
    ap.add_argument("input", nargs="?", default=None, help="Text file to translate (default: stdin)")
    ap.add_argument(
        "--dictionary",
        default=str(DEFAULT_DATA_DIR / DICTIONARY_FILENAME),
        help="Path to shavian-dictionary.json",
    )
    args = ap.parse_args(argv)

    if args.input:
        text = Path(args.input).read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()

    store = DictionaryStore.load(Path(args.dictionary))
    try:
        result = translate(text, store)
    except UsageError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    sys.stdout.write(result.output)
    if result.hasUntranslated:
        print("[warn] Some words are not in the dictionary and were left untranslated", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
