from fastapi import APIRouter, Query

from coda.log_buffer import log_handler
from coda.schemas.system import LogEntryOut

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=list[LogEntryOut])
async def get_logs(
    limit: int = Query(default=200, ge=1, le=1000),
    level: str | None = Query(default=None),
    logger: str | None = Query(default=None),
) -> list[LogEntryOut]:
    return [LogEntryOut(**e) for e in log_handler.get_entries(limit=limit, level=level, logger_name=logger)]
