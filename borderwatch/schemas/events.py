"""
Realtime event schemas for BorderWatch.

Every message pushed over the WebSocket is one of these variants, told
apart by its "type" field.
"""

from datetime import datetime
from typing import Annotated, Literal, Union
from pydantic import Field, TypeAdapter

from borderwatch.schemas.alerts import AlertOut
from borderwatch.schemas.common import APIModel
from borderwatch.schemas.location import LocationSample
from borderwatch.schemas.reports import UrgentReportPayload
from borderwatch.schemas.threats import ThreatAlertPayload


class _Event(APIModel):
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ConnectionEstablished(_Event):
    type: Literal["connection_established"] = "connection_established"


class NewAlertEvent(_Event):
    type: Literal["new_alert"] = "new_alert"
    data: AlertOut


class ThreatAlertEvent(_Event):
    type: Literal["threat_alert"] = "threat_alert"
    data: ThreatAlertPayload


class UrgentReportEvent(_Event):
    type: Literal["urgent_report"] = "urgent_report"
    data: UrgentReportPayload


class LocationUpdateEvent(_Event):
    type: Literal["location_update"] = "location_update"
    data: LocationSample


BroadcastEvent = Annotated[
    Union[
        ConnectionEstablished,
        NewAlertEvent,
        ThreatAlertEvent,
        UrgentReportEvent,
        LocationUpdateEvent,
    ],
    Field(discriminator="type"),
]

broadcast_event_adapter = TypeAdapter(BroadcastEvent)
