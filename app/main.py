from fastapi import FastAPI
from app.api import events
from app.api.errors import setup_error_handlers
from app.db.redis_client import redis_client
from app.middleware.logging import logging_middleware
from prometheus_client import make_asgi_app
import structlog

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ]
)

app = FastAPI(title="Sling Analytics API")

@app.on_event("startup")
async def startup():
    await redis_client.connect()

@app.on_event("shutdown")
async def shutdown():
    await redis_client.close()

app.middleware("http")(logging_middleware)
setup_error_handlers(app)

app.include_router(events.router, tags=["events"])

metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

@app.get("/health")
async def health():
    return {"status": "healthy"}
