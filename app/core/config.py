import os
from datetime import timedelta

# DEV defaults. Override through the environment in any shared deployment.
SECRET_KEY = os.getenv("EDUSPRINT_SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(minutes=int(os.getenv("EDUSPRINT_TOKEN_MINUTES", "60")))

DATABASE_URL = os.getenv("EDUSPRINT_DATABASE_URL")

# Penalty schedule
PENALTY_STEP_PERCENT_PER_DAY = 2  # each day-value shifts the penalty by 2 points
DEFAULT_PENALTY_RATE_PERCENT = 2
DEFAULT_TASK_WEIGHT = 10

# Urgency buckets (days remaining, upper bound exclusive)
URGENT_BEFORE_DAYS = 2
HIGH_BEFORE_DAYS = 5
MEDIUM_BEFORE_DAYS = 10
