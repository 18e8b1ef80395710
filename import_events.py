import sys
import asyncio
import json
from pathlib import Path
from pydantic import ValidationError
from app.config import settings
from app.db.redis_client import redis_client
from app.models.events import AnalyticsEvent, EventBatch
from app.services.ingestion import record_batch
import structlog

logger = structlog.get_logger()


def parse_events(filepath: str) -> list:
    """Read exported events: a JSON batch, a JSON array, or one event per line."""
    text = Path(filepath).read_text(encoding='utf-8')

    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        document = None

    if isinstance(document, dict) and "events" in document:
        return EventBatch.model_validate(document).events or []

    if isinstance(document, dict):
        rows = [document]
    elif isinstance(document, list):
        rows = document
    else:
        rows = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError as e:
                logger.error("line_parse_failed", line=lineno, error=str(e))

    events = []
    for row in rows:
        try:
            events.append(AnalyticsEvent.model_validate(row))
        except ValidationError as e:
            logger.error("event_parse_failed", error_count=e.error_count())
            continue

    return events


def chunk_events(events: list, chunk_size: int = 50):
    for i in range(0, len(events), chunk_size):
        yield events[i:i + chunk_size]


async def import_events(filepath: str) -> int:
    logger.info("import_started", filepath=filepath)

    events = parse_events(filepath)

    if not events:
        logger.error("no_events_found", filepath=filepath)
        return 0

    logger.info("events_parsed", count=len(events))

    await redis_client.connect()
    imported = 0
    try:
        for idx, chunk in enumerate(chunk_events(events, settings.import_chunk_size)):
            imported += await record_batch(redis_client, chunk)
            logger.info("chunk_imported", chunk_index=idx, size=len(chunk))
    finally:
        await redis_client.close()

    logger.info("import_completed", total_events=imported)
    return imported


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python import_events.py <path-to-events>")
        sys.exit(1)

    filepath = sys.argv[1]

    if not Path(filepath).exists():
        print(f"File not found: {filepath}")
        sys.exit(1)

    asyncio.run(import_events(filepath))
