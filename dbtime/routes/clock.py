"""
DB Time Service: Root Route Handler
=====================================

What:  Handles GET / by asking the database for its current time.
How:   Runs SELECT NOW() through the DatabaseClient and returns the first
       row's `now` column as plain text.
Who:   The only route the application registers.

Request Flow:
    1. db.execute("SELECT NOW()")
    2. timestamp = rows[0]["now"]
    3. 200 text/plain "Current time from DB: <timestamp>"

    An empty result from step 1 is raised as DatabaseError. DatabaseError is
    not caught here; the handler registered in main.py turns it into the
    500 response.
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from dbtime.database import DatabaseClient, get_database
from dbtime.exceptions import DatabaseError

router = APIRouter(tags=["Clock"])

CURRENT_TIME_QUERY = "SELECT NOW()"
RESPONSE_PREFIX = "Current time from DB: "


def format_timestamp(value: Any) -> str:
    """ISO 8601 for datetimes, str() for anything else the driver returns."""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Current database server time",
)
async def current_time(db: DatabaseClient = Depends(get_database)) -> str:
    rows = await db.execute(CURRENT_TIME_QUERY)
    if not rows:
        raise DatabaseError(
            message="query returned no rows",
            context={"query": CURRENT_TIME_QUERY},
        )
    timestamp = rows[0]["now"]
    return RESPONSE_PREFIX + format_timestamp(timestamp)
