"""LLM call metrics for this process."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter

from services.llm_monitoring import llm_monitoring

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/monitoring", tags=["Monitoring"])


@router.get("/metrics")
async def get_metrics():
    return {"metrics": llm_monitoring.get_metrics(), "timestamp": datetime.now(UTC).isoformat()}


@router.post("/reset")
async def reset_metrics():
    llm_monitoring.reset_metrics()
    logger.info("LLM monitoring metrics reset")
    return {"message": "Metrics reset successfully"}
