from typing import TypeVar

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from loguru import logger

from hospital.api.dependencies import DeadlineDep, StoreDep
from hospital.domain.models import (
    Appointment,
    AppointmentStatus,
    Department,
    Doctor,
    Patient,
    Record,
    User,
    utc_now,
)
from hospital.services.validation import validate_appointment
from hospital.store.ports import AbstractCollectionStore

RecordT = TypeVar("RecordT", bound=Record)

router = APIRouter()


async def _persist(
    collection: AbstractCollectionStore, record: RecordT, deadline: float
) -> RecordT:
    """Insert ``record`` and return it carrying the identifier the store assigned."""
    record_id = await collection.insert(record.to_document(), deadline=deadline)
    return record.model_copy(update={"id": record_id})


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(user: User, store: StoreDep, deadline: DeadlineDep) -> User:
    logger.info("Creating user")
    user = user.model_copy(update={"created_at": utc_now()})
    return await _persist(store.users, user, deadline)


@router.get("/users/list", response_model=list[User])
async def get_users(store: StoreDep, deadline: DeadlineDep) -> list[User]:
    documents = await store.users.find(deadline=deadline)
    return [User.model_validate(d) for d in documents]


@router.post("/patients", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def create_patient(patient: Patient, store: StoreDep, deadline: DeadlineDep) -> Patient:
    logger.info("Creating patient")
    patient = patient.model_copy(update={"created_at": utc_now()})
    return await _persist(store.patients, patient, deadline)


@router.get("/patients/list", response_model=list[Patient])
async def get_patients(store: StoreDep, deadline: DeadlineDep) -> list[Patient]:
    documents = await store.patients.find(deadline=deadline)
    return [Patient.model_validate(d) for d in documents]


@router.post("/doctors", response_model=Doctor, status_code=status.HTTP_201_CREATED)
async def create_doctor(doctor: Doctor, store: StoreDep, deadline: DeadlineDep) -> Doctor:
    logger.info("Creating doctor")
    doctor = doctor.model_copy(update={"created_at": utc_now()})
    return await _persist(store.doctors, doctor, deadline)


@router.post("/appointments", response_model=Appointment, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment: Appointment, store: StoreDep, deadline: DeadlineDep
) -> Appointment:
    logger.info("Creating appointment: dateTime={}", appointment.date_time)
    appointment = appointment.model_copy(
        update={"created_at": utc_now(), "status": AppointmentStatus.SCHEDULED.value}
    )
    await validate_appointment(store, appointment, deadline=deadline)
    return await _persist(store.appointments, appointment, deadline)


@router.post("/departments", response_model=Department, status_code=status.HTTP_201_CREATED)
async def create_department(
    department: Department, store: StoreDep, deadline: DeadlineDep
) -> Department:
    logger.info("Creating department")
    department = department.model_copy(update={"created_at": utc_now()})
    return await _persist(store.departments, department, deadline)


@router.get("/health")
async def health(store: StoreDep, deadline: DeadlineDep) -> JSONResponse:
    if await store.health_check(deadline=deadline):
        return JSONResponse({"status": "ok"})
    return JSONResponse(
        {"status": "unavailable"}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )
