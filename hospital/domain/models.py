import datetime as dt
from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> dt.datetime:
    """Current UTC time truncated to milliseconds, the precision BSON dates keep."""
    now = dt.datetime.now(dt.timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class AppointmentStatus(str, Enum):
    """Possible states of an appointment."""

    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Record(BaseModel):
    """Base for every stored entity.

    Fields use camelCase on the wire (``bloodGroup``, ``createdAt``) and
    snake_case in Python. ``id`` and ``created_at`` are server-assigned:
    whatever a client sends for them is overwritten before insertion.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str | None = None

    def to_document(self) -> dict[str, object]:
        """Return the stored form: wire field names, without the identifier."""
        return self.model_dump(by_alias=True, exclude={"id"})


class User(Record):
    """A registered user, kept in its own database."""

    name: str
    email: str
    created_at: dt.datetime | None = None


class Patient(Record):
    name: str
    email: str
    age: StrictInt = 0
    gender: str = ""
    blood_group: str = ""
    contact_no: str = ""
    created_at: dt.datetime | None = None


class Doctor(Record):
    name: str
    email: str
    specialization: str = ""
    department: str = ""
    contact_no: str = ""
    created_at: dt.datetime | None = None


class Department(Record):
    name: str
    description: str = ""
    created_at: dt.datetime | None = None


class Appointment(Record):
    """An appointment between a patient and a doctor.

    ``status`` holds an ``AppointmentStatus`` value. It is not client-settable:
    whatever the request carries is replaced with ``Scheduled`` on creation.
    ``patient_id`` and ``doctor_id`` are stored as hex strings, not ObjectIds,
    so a MongoDB ``$lookup`` against ``_id`` will not match them.
    """

    patient_id: str = Field(min_length=1)
    doctor_id: str = Field(min_length=1)
    date_time: AwareDatetime
    status: str = AppointmentStatus.SCHEDULED.value
    description: str = ""
    created_at: dt.datetime | None = None

    @field_validator("date_time", mode="before")
    @classmethod
    def parse_iso_date_time(cls, value: object) -> dt.datetime:
        """Accept ISO 8601 strings only; numbers are not read as Unix timestamps."""
        if isinstance(value, dt.datetime):
            return value
        if not isinstance(value, str):
            raise ValueError("must be an ISO 8601 date-time string")
        try:
            return dt.datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValueError(f"invalid ISO 8601 date-time: {value!r}") from exc
