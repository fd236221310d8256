"""MCP server exposing a RewardEngine to assistants and other collaborators."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from mcp.server.fastmcp import FastMCP

from rewardledger._types import ActivityKind, round_amount
from rewardledger.engine import RewardEngine
from rewardledger.ledger import PaymentConfirmation
from rewardledger.notifications import EventTopic, Notification

# Maximum units per track_activity() call
_MAX_DELTA = 10_000


@dataclass
class _EngineHolder:
    """Holds the engine plus notifications not yet returned to the client."""

    engine: RewardEngine
    _pending: list[Notification] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.engine.subscribe(EventTopic.NOTIFICATION, self._pending.append)

    def drain(self) -> list[dict[str, str]]:
        notes = [{"message": n.message, "severity": n.severity.value} for n in self._pending]
        self._pending.clear()
        return notes


def _with_feedback(holder: _EngineHolder, result: dict[str, Any]) -> dict[str, Any]:
    result["balance"] = round_amount(holder.engine.get_balance())
    notes = holder.drain()
    if notes:
        result["notifications"] = notes
    return result


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_balance(holder: _EngineHolder) -> dict[str, Any]:
    return {"balance": round_amount(holder.engine.get_balance())}


def _tool_get_stats(holder: _EngineHolder) -> dict[str, Any]:
    stats = holder.engine.get_stats()
    stats["balance"] = round_amount(stats["balance"])
    stats["daily_goals"] = holder.engine.daily_goals_status()
    return stats


def _tool_track_activity(holder: _EngineHolder, kind: str, count: int = 1) -> dict[str, Any]:
    try:
        parsed = ActivityKind.parse(kind)
    except ValueError as exc:
        return {"error": str(exc)}
    if count < 1:
        return {"error": "Count must be at least 1"}
    if count > _MAX_DELTA:
        return {"error": f"Count cannot exceed {_MAX_DELTA}"}

    earned = holder.engine.track_activity(parsed, count)
    return _with_feedback(holder, {
        "kind": parsed.value,
        "count": count,
        "total": holder.engine.state.counter(parsed),
        "earned": round_amount(earned),
    })


def _tool_earn(holder: _EngineHolder, amount: float, reason: str = "") -> dict[str, Any]:
    if not math.isfinite(amount) or amount <= 0:
        return {"error": "Amount must be a positive number"}
    success = holder.engine.earn_cc(amount, reason)
    return _with_feedback(holder, {"success": success})


def _tool_spend(holder: _EngineHolder, amount: float, reason: str = "") -> dict[str, Any]:
    if not math.isfinite(amount) or amount <= 0:
        return {"error": "Amount must be a positive number"}
    success = holder.engine.spend_cc(amount, reason)
    result: dict[str, Any] = {"success": success}
    if not success:
        result["reason"] = "Insufficient CC"
    return _with_feedback(holder, result)


def _tool_purchase(
    holder: _EngineHolder, package_id: str, status: str, reference: str = ""
) -> dict[str, Any]:
    if holder.engine.rules.get_package(package_id) is None:
        return {"error": f"Unknown package: {package_id!r}"}
    confirmation = PaymentConfirmation(package_id, status, reference)
    success = holder.engine.purchase_cc(package_id, confirmation)
    result: dict[str, Any] = {"success": success}
    if not success:
        result["reason"] = f"Payment not confirmed (status {status!r})"
    return _with_feedback(holder, result)


def _tool_record_hydration(holder: _EngineHolder, units: int = 1) -> dict[str, Any]:
    if units < 1:
        return {"error": "Units must be at least 1"}
    holder.engine.record_hydration(units)
    return _with_feedback(holder, {"hydration": holder.engine.daily_goals_status()["hydration"]})


def _tool_record_quiz_result(holder: _EngineHolder, correct: int, total: int) -> dict[str, Any]:
    if total < 1 or not 0 <= correct <= total:
        return {"error": "Need 0 <= correct <= total and total >= 1"}
    perfect = holder.engine.record_quiz_result(correct, total)
    return _with_feedback(holder, {"perfect": perfect})


def _tool_check_achievements(holder: _EngineHolder) -> dict[str, Any]:
    unlocked = holder.engine.check_achievements()
    return _with_feedback(holder, {
        "new": unlocked,
        "achievements": list(holder.engine.state.achievements),
    })


def _tool_list_achievements(holder: _EngineHolder) -> dict[str, Any]:
    state = holder.engine.state
    return {
        "achievements": [
            {
                "id": a.id,
                "description": a.description,
                "unlocked": state.has_achievement(a.id),
            }
            for a in holder.engine.achievements.achievements
        ]
    }


def _tool_reset(holder: _EngineHolder, confirm: bool = False) -> dict[str, Any]:
    if not confirm:
        return {"success": False, "reason": "Pass confirm=true to erase all ledger data"}
    success = holder.engine.reset(confirmed=True)
    return _with_feedback(holder, {"success": success})


# ── Server factory ──────────────────────────────────────────────────


def create_server(engine: RewardEngine) -> FastMCP:
    """Create an MCP server wrapping the given engine."""
    engine.boot()
    holder = _EngineHolder(engine=engine)

    mcp = FastMCP(name="Reward Ledger")

    @mcp.tool()
    def get_balance() -> dict[str, Any]:
        """Get the current CC balance."""
        return _tool_get_balance(holder)

    @mcp.tool()
    def get_stats() -> dict[str, Any]:
        """Get balance, activity counters, recent transactions, achievements and today's goals."""
        return _tool_get_stats(holder)

    @mcp.tool()
    def track_activity(kind: str, count: int = 1) -> dict[str, Any]:
        """Report an incremental amount of activity (tasksCompleted, wordsWritten, focusMinutes, flashcardsCorrect, quizCorrect)."""
        return _tool_track_activity(holder, kind, count)

    @mcp.tool()
    def earn(amount: float, reason: str = "") -> dict[str, Any]:
        """Grant a CC bonus outside the threshold rules."""
        return _tool_earn(holder, amount, reason)

    @mcp.tool()
    def spend(amount: float, reason: str = "") -> dict[str, Any]:
        """Spend CC. Fails without change if the balance is too low."""
        return _tool_spend(holder, amount, reason)

    @mcp.tool()
    def purchase(package_id: str, status: str, reference: str = "") -> dict[str, Any]:
        """Credit a CC package once the payment gateway reported its status."""
        return _tool_purchase(holder, package_id, status, reference)

    @mcp.tool()
    def record_hydration(units: int = 1) -> dict[str, Any]:
        """Log glasses of water drunk today."""
        return _tool_record_hydration(holder, units)

    @mcp.tool()
    def record_quiz_result(correct: int, total: int) -> dict[str, Any]:
        """Record a finished quiz score."""
        return _tool_record_quiz_result(holder, correct, total)

    @mcp.tool()
    def check_achievements() -> dict[str, Any]:
        """Re-evaluate achievements. Safe to call any number of times."""
        return _tool_check_achievements(holder)

    @mcp.tool()
    def list_achievements() -> dict[str, Any]:
        """List every achievement and whether it is unlocked."""
        return _tool_list_achievements(holder)

    @mcp.tool()
    def reset(confirm: bool = False) -> dict[str, Any]:
        """Erase all ledger data. Requires confirm=true."""
        return _tool_reset(holder, confirm)

    return mcp
