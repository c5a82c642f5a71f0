"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("TIMECARDS_DB_PATH", PROJECT_ROOT / "data" / "db" / "timecards.db")
)
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

# Sentinel accepted wherever an employee id is expected
ALL_EMPLOYEES = "ALL"

# Nominal 5-day work-week policy, not derived from the calendar range
ABSENTEE_QUOTAS = {
    "daily": 1,
    "weekly": 5,
    "monthly": 20,
    "yearly": 240,
}

DATE_FORMAT = "%Y-%m-%d"

SUMMARY_HEADERS = [
    "Employee ID", "First Name", "Last Name", "Period Start",
    "Days Worked", "Absentee Days",
    "Facility Hours", "Facility Minutes", "Driving Hours", "Driving Minutes",
]
TOTALS_HEADERS = [
    "Employee ID", "First Name", "Last Name",
    "Facility Hours", "Facility Minutes", "Driving Hours", "Driving Minutes",
]

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# =============================================================================
# API CONFIGURATION
# =============================================================================

TIMECARDS_API_KEY = os.environ.get("TIMECARDS_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
