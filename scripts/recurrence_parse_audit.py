#!/usr/bin/env python3

"""
Load data/reminder_samples.json and run the reminder parser over each sample.
Outputs a JSON and optional CSV with per-item results and a summary, so a
change to the parser can be reviewed against a broad set of phrasings.

Usage:
  python scripts/recurrence_parse_audit.py \
    --input data/reminder_samples.json \
    --out data/reminder_parse_results.json \
    --csv data/reminder_parse_results.csv \
    --now 2026-10-12T10:00
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List


def _ensure_project_on_path():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_ensure_project_on_path()

from reminder_parser.calendar_rules import describe_recurrence, recurrence_to_rrule_string  # noqa: E402
from reminder_parser.parser import parse_reminder  # noqa: E402

logger = logging.getLogger('recurrence_parse_audit')

KINDS = ["recurrence+date", "recurrence-only", "date-only", "none"]


def safe_iso(dt) -> str | None:
    if dt is None:
        return None
    return dt.isoformat()


def classify_result(result) -> str:
    recurring = result.recurrence.is_recurring
    if recurring and result.date is not None:
        return "recurrence+date"
    if recurring:
        return "recurrence-only"
    if result.date is not None:
        return "date-only"
    return "none"


def run_one(text: str, now: datetime | None) -> Dict[str, Any]:
    result = parse_reminder(text, now)
    rec = result.recurrence
    return {
        "title": result.title,
        "parsed_dt": safe_iso(result.date),
        "rec": rec.model_dump(mode="json", exclude_defaults=True) if rec.is_recurring else None,
        "rrule": recurrence_to_rrule_string(rec),
        "pattern": describe_recurrence(rec),
        "needs_end_date": rec.needs_end_date,
        "kind": classify_result(result),
    }


def main():
    ap = argparse.ArgumentParser(description="Audit reminder parsing on sample phrases")
    ap.add_argument("--input", default="data/reminder_samples.json", help="input JSON file")
    ap.add_argument("--out", default="data/reminder_parse_results.json", help="output JSON file")
    ap.add_argument("--csv", default="", help="optional CSV output path")
    ap.add_argument("--limit", type=int, default=0, help="limit number of items (0=all)")
    ap.add_argument("--now", default="", help="reference time as ISO datetime (default: real clock)")
    ap.add_argument("--verbose", action="store_true", help="log parser decisions")
    args = ap.parse_args()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s:%(name)s: %(message)s'))
    logging.getLogger().addHandler(handler)
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else logging.INFO)

    now = datetime.fromisoformat(args.now) if args.now else None

    src = Path(args.input)
    data = json.loads(src.read_text(encoding="utf-8"))
    items = data.get("items") or []
    if args.limit and args.limit > 0:
        items = items[: args.limit]

    results: List[Dict[str, Any]] = []
    counts = {"total": 0, **{k: 0 for k in KINDS}}

    for it in items:
        text = it.get("text", "")
        rid = it.get("id")
        try:
            parsed = run_one(text, now)
        except ValueError:
            logger.warning("skipping sample %s: empty text", rid)
            continue
        results.append({"id": rid, "text": text, **parsed})
        counts["total"] += 1
        counts[parsed["kind"]] += 1

    out_json = {
        "input": str(src),
        "now": safe_iso(now),
        "count": len(results),
        "summary": counts,
        "items": results,
    }

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(out_json, ensure_ascii=False, indent=2), encoding="utf-8")

    if args.csv:
        import csv

        csv_path = Path(args.csv)
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        fields = ["id", "kind", "title", "parsed_dt", "rrule", "pattern", "text"]
        with csv_path.open("w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=fields)
            w.writeheader()
            for r in results:
                w.writerow({k: r.get(k, "") for k in fields})

    print("Summary:")
    for k in ["total", *KINDS]:
        print(f"  {k}: {counts[k]}")
    print(f"Wrote JSON: {out_path}")
    if args.csv:
        print(f"Wrote CSV: {args.csv}")


if __name__ == "__main__":
    main()
