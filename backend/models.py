"""
Domain records for the protest tracker.

Rows come back from psycopg2 as DictCursor rows; `from_row` maps them onto
these dataclasses and `to_dict` produces the JSON shape the frontend expects
(camelCase keys, ISO-8601 timestamps, never the password hash).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

ROLE_SPOTTER = "spotter"
ROLE_ADVOCATE = "advocate"
VALID_ROLES = (ROLE_SPOTTER, ROLE_ADVOCATE)

MEDIA_PHOTO = "photo"
MEDIA_VIDEO = "video"
VALID_MEDIA_TYPES = (MEDIA_PHOTO, MEDIA_VIDEO)


@dataclass
class User:
    id: int
    email: str
    role: str
    password_hash: str = field(default="", repr=False)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(
            id=row["id"],
            email=row["email"],
            role=row["role"],
            password_hash=row.get("password") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "role": self.role}


@dataclass
class ArrestEvent:
    id: Optional[int]
    time: datetime
    latitude: float
    longitude: float
    police_count: int = 0
    arrested_count: int = 0
    car_plates: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ArrestEvent":
        return cls(
            id=row["id"],
            time=row["time"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            police_count=row["police_count"],
            arrested_count=row["arrested_count"],
            car_plates=row.get("car_plates"),
            notes=row.get("notes"),
            created_by=row["created_by"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "time": self.time.isoformat() if self.time else None,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "policeCount": self.police_count,
            "arrestedCount": self.arrested_count,
            "carPlates": self.car_plates or "",
            "notes": self.notes or "",
            "createdBy": self.created_by,
        }


@dataclass
class Media:
    id: Optional[int]
    event_id: int
    file_path: str
    type: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Media":
        return cls(
            id=row["id"],
            event_id=row["event_id"],
            file_path=row["file_path"],
            type=row["type"],
        )

    @property
    def url(self) -> str:
        return f"/api/events/{self.event_id}/media/{self.id}/file"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "eventId": self.event_id,
            "filePath": self.file_path,
            "type": self.type,
            "url": self.url,
        }


@dataclass
class Subscription:
    id: int
    event_id: int
    user_id: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Subscription":
        return cls(id=row["id"], event_id=row["event_id"], user_id=row["user_id"])

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "eventId": self.event_id, "userId": self.user_id}


@dataclass(frozen=True)
class Claims:
    """Decoded token payload."""
    user_id: int
    role: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, attached to the request by the access gate."""
    user_id: int
    role: str

    @property
    def is_advocate(self) -> bool:
        return self.role == ROLE_ADVOCATE
