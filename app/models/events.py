from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator
from datetime import datetime
from typing import Dict, Any, List, Optional

_datetime_adapter = TypeAdapter(datetime)


class DeviceInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    device_model: Optional[str] = None
    os_version: Optional[str] = None
    app_version: Optional[str] = None
    build_number: Optional[str] = None
    locale: Optional[str] = None
    timezone: Optional[str] = None


class AnalyticsEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    event: str
    timestamp: str
    session_id: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
    device: Optional[DeviceInfo] = None

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        try:
            _datetime_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("timestamp must be an ISO 8601 datetime")
        return v

    @property
    def occurred_at(self) -> datetime:
        return _datetime_adapter.validate_python(self.timestamp)

    def raw_json(self) -> str:
        """The event as the client sent it: no defaults filled in, explicit nulls kept."""
        return self.model_dump_json(exclude_unset=True)


class EventBatch(BaseModel):
    events: Optional[List[AnalyticsEvent]] = None
    sent_at: Optional[datetime] = None


class IngestResponse(BaseModel):
    success: bool
    received: int
    timestamp: str


class HourCount(BaseModel):
    hour: str
    count: int


class StepCount(BaseModel):
    step: str
    count: int


class NamedCount(BaseModel):
    name: str
    count: int


class DayCount(BaseModel):
    date: str
    events: int


class DashboardData(BaseModel):
    total_events: int
    events_today: int
    active_sessions: int
    recent_events: List[Dict[str, Any]]
    events_by_type: Dict[str, int]
    events_by_hour: List[HourCount]
    signup_funnel: List[StepCount]
    devices: List[NamedCount]
    daily_stats: List[DayCount]
