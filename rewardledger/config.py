import os

APPDATA_DIR = os.getenv("REWARDLEDGER_HOME") or os.path.join(
    os.path.expanduser("~"), ".rewardledger"
)

DATA_FILE = os.path.join(APPDATA_DIR, "ledger.json")

LOG_DIR = os.path.join(APPDATA_DIR, "logs")
LOG_FILE = os.path.join(LOG_DIR, "rewardledger.log")
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3

SCHEMA_VERSION = 1
# Distinct active dates kept for streak evaluation
ACTIVE_DAYS_KEPT = 30
