from loguru import logger

from hospital.domain.exceptions import RecordNotFoundError, ReferenceNotFoundError
from hospital.domain.models import Appointment
from hospital.store.entity_store import EntityStore


async def validate_appointment(
    store: EntityStore, appointment: Appointment, *, deadline: float | None = None
) -> None:
    """Check that the appointment's patient and doctor both exist.

    The lookups run one after the other under the caller's deadline and
    nothing is written, so a failure needs no cleanup. This is an
    existence check at creation time only; it does not keep the
    references valid afterwards.

    Raises:
        ReferenceNotFoundError: If the patient or the doctor is missing.
        StoreUnavailableError: If a lookup fails or overruns the deadline.
    """
    try:
        await store.patients.find_one({"id": appointment.patient_id}, deadline=deadline)
    except RecordNotFoundError as exc:
        logger.info("Appointment rejected: unknown patient")
        raise ReferenceNotFoundError("patient") from exc

    try:
        await store.doctors.find_one({"id": appointment.doctor_id}, deadline=deadline)
    except RecordNotFoundError as exc:
        logger.info("Appointment rejected: unknown doctor")
        raise ReferenceNotFoundError("doctor") from exc
