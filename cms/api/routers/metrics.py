# cms/api/routers/metrics.py

from typing import Annotated

from fastapi import APIRouter, Depends

from cms.api.dependencies import get_metrics
from cms.observability.metrics import MetricsCollector

router = APIRouter()


@router.get("/metrics")
async def metrics(collector: Annotated[MetricsCollector, Depends(get_metrics)]):
    """Export counters and latency histograms."""
    return collector.export_metrics()
