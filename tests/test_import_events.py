import json
import pytest
import import_events
from app.db.redis_client import redis_client
from conftest import make_event


def test_parse_events_jsonl_skips_bad_lines(tmp_path):
    path = tmp_path / "events.jsonl"
    lines = [json.dumps(make_event("tap")), "not json", "", json.dumps({"event": "missing_ts"}), json.dumps(make_event("screen_view"))]
    path.write_text("\n".join(lines), encoding="utf-8")

    events = import_events.parse_events(str(path))

    assert [e.event for e in events] == ["tap", "screen_view"]


def test_parse_events_batch_document(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps({"events": [make_event("tap")], "sent_at": "2026-10-19T12:00:05Z"}), encoding="utf-8")

    events = import_events.parse_events(str(path))

    assert len(events) == 1


def test_chunk_events():
    chunks = list(import_events.chunk_events(list(range(120)), 50))
    assert [len(c) for c in chunks] == [50, 50, 20]


@pytest.mark.asyncio
async def test_import_events_records_in_chunks(tmp_path, fake_redis, monkeypatch, today):
    path = tmp_path / "events.json"
    path.write_text(json.dumps([make_event("tap") for _ in range(120)]), encoding="utf-8")

    async def connect():
        redis_client.redis = fake_redis

    async def close():
        pass

    monkeypatch.setattr(redis_client, "connect", connect)
    monkeypatch.setattr(redis_client, "close", close)

    imported = await import_events.import_events(str(path))

    assert imported == 120
    assert fake_redis.data[f"stats:{today}:types"] == {"tap": "120"}
    assert fake_redis.data["stats:total"] == "120"
