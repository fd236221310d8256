from __future__ import annotations

from datetime import datetime

from rewardledger.transaction import Transaction, TransactionType


def balance_series(
    transactions: list[Transaction], current_balance: float
) -> list[tuple[datetime, float]]:
    """Balance after each logged transaction, oldest first.

    Walks the newest-first log backwards from the current balance. Penalty
    entries hold the nominal amount even when the deduction was clamped at
    zero, so values before such a penalty are an upper bound.
    """
    series: list[tuple[datetime, float]] = []
    balance = current_balance
    for t in transactions:
        if t.timestamp is not None:
            series.append((t.timestamp, round(balance, 2)))
        balance -= t.signed_amount
    series.reverse()
    return series


def plot_history(
    transactions: list[Transaction],
    current_balance: float,
    output_path: str | None = None,
) -> None:
    """Generate a 2-panel matplotlib view of the transaction log.

    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for visualization. "
            "Install with: pip install rewardledger[viz]"
        )

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))
    fig.suptitle(f"Reward Ledger: balance {current_balance:.2f} CC", fontsize=14)

    # 1. Balance over time
    series = balance_series(transactions, current_balance)
    if series:
        times, values = zip(*series)
        ax1.step(times, values, where="post")
        ax1.scatter(times, values, s=10, alpha=0.6)
    ax1.set_xlabel("Time")
    ax1.set_ylabel("CC")
    ax1.set_title("Balance")
    ax1.grid(True, alpha=0.3)
    fig.autofmt_xdate()

    # 2. Totals per transaction type
    types = list(TransactionType)
    totals = [sum(t.amount for t in transactions if t.type is ty) for ty in types]
    ax2.bar([ty.value for ty in types], totals, alpha=0.7)
    ax2.set_ylabel("CC")
    ax2.set_title("Totals by Type")
    ax2.grid(True, alpha=0.3, axis="y")

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150)
        plt.close(fig)
    else:
        plt.show()
