from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, status, Depends
from app.api.errors import NO_EVENTS, INTERNAL_ERROR
from app.db.redis_client import RedisClient, get_redis
from app.models.events import EventBatch, IngestResponse, DashboardData
from app.services.ingestion import record_batch
from app.services.dashboard import build_dashboard
from prometheus_client import Counter, Histogram
import structlog

router = APIRouter()
logger = structlog.get_logger()

events_counter = Counter('events_received_total', 'Total events received')
events_failed_counter = Counter('events_failed_total', 'Total event batches failed')
events_duration = Histogram('events_processing_seconds', 'Event processing duration')
dashboard_counter = Counter('dashboard_queries_total', 'Total dashboard queries')
dashboard_failed_counter = Counter('dashboard_failed_total', 'Total dashboard queries failed')


@router.post("/api/events", response_model=IngestResponse)
async def ingest_events(batch: EventBatch, client: RedisClient = Depends(get_redis)):
    if not batch.events:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_EVENTS)

    try:
        with events_duration.time():
            received = await record_batch(client, batch.events)

        events_counter.inc(received)

        logger.info("events_ingested", count=received, sent_at=batch.sent_at and batch.sent_at.isoformat())

        return IngestResponse(
            success=True,
            received=received,
            timestamp=datetime.now(timezone.utc).isoformat()
        )

    except Exception as e:
        events_failed_counter.inc()
        logger.error("events_ingest_failed", count=len(batch.events), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR
        )


@router.get("/api/events", response_model=DashboardData)
async def get_dashboard(client: RedisClient = Depends(get_redis)):
    try:
        result = await build_dashboard(client)
        dashboard_counter.inc()

        logger.info(
            "dashboard_query",
            total_events=result.total_events,
            events_today=result.events_today,
            active_sessions=result.active_sessions
        )
        return result

    except Exception as e:
        dashboard_failed_counter.inc()
        logger.error("dashboard_query_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR
        )
