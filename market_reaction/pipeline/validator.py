"""Output validator — sanity checks on an exported results.json.

Checks:
  1. Every row has the required fields
  2. event_class is a known class
  3. |pctChange| >= threshold for every row (only movers are analyzed)
  4. Timestamps are ISO 8601

Usage:
    python -m market_reaction.pipeline.validator output/results.json [threshold]
"""

import json
import sys
from datetime import datetime
from typing import List, Tuple

from market_reaction.core.config import DEFAULT_THRESHOLD
from market_reaction.models.datatypes import EventClass

_REQUIRED_FIELDS = ["ticker", "pctChange", "price", "reason_summary", "event_class", "timestamp"]


def validate(json_path: str, threshold: float = DEFAULT_THRESHOLD) -> Tuple[bool, List[str]]:
    """Run all validation checks against json_path.

    Args:
        json_path: Path to an exported ``results.json``.
        threshold: Move threshold the run was configured with.

    Returns:
        Tuple of ``(passed: bool, messages: list[str])``.
    """
    messages: List[str] = []
    passed = True

    # ── load ──────────────────────────────────────────────────────────────────
    try:
        with open(json_path, encoding="utf-8") as f:
            rows = json.load(f)
    except FileNotFoundError:
        return False, [f"FAIL  file not found: {json_path}"]
    except (OSError, ValueError) as exc:
        return False, [f"FAIL  could not read JSON: {exc}"]

    if not isinstance(rows, list):
        return False, ["FAIL  results must be a JSON list"]
    if not rows:
        return True, ["PASS  no records (no movers in this run)"]

    # ── check 1: required fields ──────────────────────────────────────────────
    missing = [
        (i, [k for k in _REQUIRED_FIELDS if k not in row])
        for i, row in enumerate(rows)
        if any(k not in row for k in _REQUIRED_FIELDS)
    ]
    if missing:
        return False, [f"FAIL  missing fields: {missing[:3]}"]
    messages.append(f"PASS  all {len(rows)} rows carry the required fields")

    # ── check 2: event_class ──────────────────────────────────────────────────
    known = {c.value for c in EventClass}
    bad_classes = [(r["ticker"], r["event_class"]) for r in rows if r["event_class"] not in known]
    if not bad_classes:
        messages.append("PASS  event_class is a known class for all rows")
    else:
        messages.append(f"FAIL  unknown event_class in {len(bad_classes)} rows: {bad_classes[:3]}")
        passed = False

    # ── check 3: only movers ──────────────────────────────────────────────────
    below = []
    for row in rows:
        try:
            if abs(float(row["pctChange"])) < threshold:
                below.append((row["ticker"], row["pctChange"]))
        except (TypeError, ValueError):
            below.append((row["ticker"], row["pctChange"]))
    if not below:
        messages.append(f"PASS  |pctChange| >= {threshold} for all rows")
    else:
        messages.append(f"FAIL  {len(below)} rows below threshold {threshold}: {below[:3]}")
        passed = False

    # ── check 4: timestamps ───────────────────────────────────────────────────
    bad_ts = []
    for row in rows:
        try:
            datetime.fromisoformat(str(row["timestamp"]))
        except ValueError:
            bad_ts.append(row["ticker"])
    if not bad_ts:
        messages.append("PASS  timestamps are ISO 8601")
    else:
        messages.append(f"FAIL  unparseable timestamps for {bad_ts[:3]}")
        passed = False

    return passed, messages


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python -m market_reaction.pipeline.validator <path_to_json> [threshold]")
        return 1
    json_path = sys.argv[1]
    threshold = float(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_THRESHOLD
    passed, messages = validate(json_path, threshold)
    for msg in messages:
        print(msg)
    if passed:
        print("\nVALIDATION PASSED ✓")
        return 0
    else:
        print("\nVALIDATION FAILED ✗")
        return 1


if __name__ == "__main__":
    sys.exit(main())
