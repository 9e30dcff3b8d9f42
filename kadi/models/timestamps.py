"""
Timezone-aware timestamp helpers shared by the table models
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime

# Column type for every audit timestamp; values are always stored in UTC
TIMESTAMP = DateTime(timezone=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
