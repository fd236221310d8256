from __future__ import annotations

from typing import Any


def format_stats(
    stats: dict[str, Any],
    goals: dict[str, dict[str, Any]] | None = None,
) -> str:
    """Format engine stats for console output."""
    lines: list[str] = []

    lines.append("=" * 20 + " Reward Ledger " + "=" * 20)
    lines.append(f"Balance: {stats['balance']:.2f} CC")
    lines.append(f"Last active: {stats.get('last_active_date') or 'never'}")
    if stats.get("mood"):
        lines.append(f"Mood: {stats['mood']}")
    lines.append("")

    lines.append("ACTIVITY:")
    for kind, count in stats["counters"].items():
        lines.append(f"  {kind:.<30s} {count}")
    lines.append("")

    if goals:
        lines.append("TODAY:")
        for key, g in goals.items():
            marker = "  [x]" if g["met"] else "  [ ]"
            lines.append(f"{marker} {key}: {g['done']}/{g['goal']}")
        lines.append("")

    if stats.get("achievements"):
        lines.append("ACHIEVEMENTS:")
        for aid in stats["achievements"]:
            lines.append(f"  * {aid}")
        lines.append("")

    lines.append("RECENT TRANSACTIONS:")
    if not stats["transactions"]:
        lines.append("  (none)")
    for t in stats["transactions"]:
        sign = "-" if t["type"] in ("spent", "penalty") else "+"
        when = (t.get("timestamp") or "")[:19].replace("T", " ")
        lines.append(
            f"  {when:19s} {t['type']:<9s} {sign}{t['amount']:.2f}  {t['reason']}"
        )

    return "\n".join(lines)
