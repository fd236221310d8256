# rewardledger — Productivity Reward Currency Ledger

from rewardledger._types import ActivityKind, compare, format_amount, round_amount
from rewardledger.errors import (
    LedgerError,
    InvalidAmount,
    InsufficientFunds,
    PersistenceFailure,
    CorruptPersistedState,
)
from rewardledger.rules import EarningRule, PenaltyTier, PurchasePackage, LedgerRules
from rewardledger.transaction import Transaction, TransactionType
from rewardledger.state import DailyProgress, LedgerState
from rewardledger.notifications import EventBus, EventTopic, Notification, Severity
from rewardledger.ledger import Ledger, PaymentConfirmation
from rewardledger.activity import ActivityAccumulator, ThresholdEarningEngine
from rewardledger.penalty import InactivityPenaltyEvaluator, PenaltyResult
from rewardledger.requirement import EvaluationContext, Requirement, Req
from rewardledger.achievement import (
    DEFAULT_ACHIEVEMENTS,
    AchievementDef,
    AchievementEvaluator,
)
from rewardledger.persistence import (
    PersistenceGateway,
    MemoryGateway,
    JsonFileGateway,
)
from rewardledger.mood import Mood, mood_for
from rewardledger.engine import RewardEngine
from rewardledger.producers import ActivityProducer, CumulativeTracker, screen_producers
from rewardledger.formatting import format_stats

__all__ = [
    # Types
    "ActivityKind",
    "compare",
    "format_amount",
    "round_amount",
    # Errors
    "LedgerError",
    "InvalidAmount",
    "InsufficientFunds",
    "PersistenceFailure",
    "CorruptPersistedState",
    # Rules
    "EarningRule",
    "PenaltyTier",
    "PurchasePackage",
    "LedgerRules",
    # State
    "Transaction",
    "TransactionType",
    "DailyProgress",
    "LedgerState",
    # Notifications
    "EventBus",
    "EventTopic",
    "Notification",
    "Severity",
    # Components
    "Ledger",
    "PaymentConfirmation",
    "ActivityAccumulator",
    "ThresholdEarningEngine",
    "InactivityPenaltyEvaluator",
    "PenaltyResult",
    # Achievements
    "EvaluationContext",
    "Requirement",
    "Req",
    "DEFAULT_ACHIEVEMENTS",
    "AchievementDef",
    "AchievementEvaluator",
    # Persistence
    "PersistenceGateway",
    "MemoryGateway",
    "JsonFileGateway",
    # Engine
    "Mood",
    "mood_for",
    "RewardEngine",
    "ActivityProducer",
    "CumulativeTracker",
    "screen_producers",
    "format_stats",
]
