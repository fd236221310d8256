from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Iterable

from rewardledger.transaction import Transaction


def export_csv(transactions: Iterable[Transaction], path: str | Path) -> None:
    """Export the transaction log as CSV, oldest entry first."""
    rows = list(transactions)
    with open(str(path), "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["timestamp", "type", "amount", "signed_amount", "reason"])
        for t in reversed(rows):
            writer.writerow([
                t.timestamp.isoformat() if t.timestamp else "",
                t.type.value,
                f"{t.amount:.2f}",
                f"{t.signed_amount:.2f}",
                t.reason,
            ])


def export_json(
    stats: dict[str, Any],
    transactions: Iterable[Transaction],
    path: str | Path,
) -> None:
    """Export engine stats plus the full transaction log as JSON."""
    data = dict(stats)
    data["transactions"] = [t.to_dict() for t in transactions]
    with open(str(path), "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
