#!/usr/bin/env python3
"""
Maintain shavian-dictionary.json from the command line.

Subcommands:
  list             print every word, sorted by Latin translation
  define S L       add or update Shavian word S with translation L
  remove S         delete Shavian word S
  import FILE      merge another dictionary file (any supported shape)
  export-listing   write a sorted, tab-separated listing (latin<TAB>shavian)

Default dictionary: $DATA_DIR/shavian-dictionary.json (DATA_DIR defaults to api/data).
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "api"))

from dictionary_store import DICTIONARY_FILENAME, DictionaryStore  # noqa: E402

DEFAULT_DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT / "api" / "data")))


def format_listing(store: DictionaryStore) -> List[str]:
    return [f"{m.translation}\t{m.script}" for m in store.entries()]


def cmd_list(store: DictionaryStore, args: argparse.Namespace) -> int:
    lines = format_listing(store)
    if not lines:
        print("No words defined yet.")
        return 0
    print(f"Total words: {len(lines)}")
    for line in lines:
        print(line)
    return 0


def cmd_define(store: DictionaryStore, args: argparse.Namespace) -> int:
    try:
        m = store.define(args.shavian, args.latin)
    except ValueError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    print(f"Added: {m.script} → {m.translation}")
    return 0


def cmd_remove(store: DictionaryStore, args: argparse.Namespace) -> int:
    if args.shavian not in store:
        print(f"[skip] Not in dictionary: {args.shavian}", file=sys.stderr)
        return 0
    store.remove(args.shavian)
    print(f"Removed: {args.shavian}")
    return 0


def cmd_import(store: DictionaryStore, args: argparse.Namespace) -> int:
    incoming_path = Path(args.file)
    if not incoming_path.exists():
        print(f"Incoming file not found: {incoming_path}", file=sys.stderr)
        return 1

    incoming = DictionaryStore.load(incoming_path)
    changed = store.merge(incoming, overwrite=not args.keep_existing)
    print(f"Merged {len(incoming)} incoming entries ({changed} changed). Total entries: {len(store)}.")
    return 0


def cmd_export_listing(store: DictionaryStore, args: argparse.Namespace) -> int:
    lines = format_listing(store)
    out = Path(args.out)
    out.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    print(f"Wrote {len(lines)} entries to {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Manage the Shavian dictionary file")
    ap.add_argument(
        "--dictionary",
        default=str(DEFAULT_DATA_DIR / DICTIONARY_FILENAME),
        help="Path to shavian-dictionary.json",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Print all words").set_defaults(func=cmd_list)

    p = sub.add_parser("define", help="Add or update a word")
    p.add_argument("shavian")
    p.add_argument("latin")
    p.set_defaults(func=cmd_define)

    p = sub.add_parser("remove", help="Delete a word")
    p.add_argument("shavian")
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("import", help="Merge another dictionary file")
    p.add_argument("file")
    p.add_argument("--keep-existing", action="store_true", help="Do not overwrite words already defined")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("export-listing", help="Write a sorted tab-separated listing")
    p.add_argument("--out", default="shavian_listing.txt")
    p.set_defaults(func=cmd_export_listing)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    store = DictionaryStore.load(Path(args.dictionary))
    return args.func(store, args)


if __name__ == "__main__":
    sys.exit(main())
