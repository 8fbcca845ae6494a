from datetime import tzinfo

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response

from storebooking.api.v1.schemas import (
    AppointmentSchema,
    CreateAppointmentSchema,
    TimeSlotSchema,
    UpdateAppointmentSchema,
)
from storebooking.application.exceptions import SchedulingError
from storebooking.application.ports.store_directory import StoreDirectoryPort
from storebooking.application.use_cases.appointment_lifecycle import AppointmentLifecycleUseCase
from storebooking.application.use_cases.authorization import require_client, resolve_authorization_context
from storebooking.application.use_cases.availability import AvailabilityUseCase
from storebooking.application.utils.time_parser import parse_instant
from storebooking.domain.entities.appointment import AppointmentPatch
from storebooking.domain.entities.auth_context import AuthorizationContext
from storebooking.wiring.dependencies import (
    get_availability_use_case,
    get_lifecycle_use_case,
    get_store_directory,
    get_timezone,
)

router = APIRouter(prefix="/api/v1/appointments")


def _http_error(e: SchedulingError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


def get_auth_context(
    user_id: str = Header(..., alias="X-User-Id"),
    directory: StoreDirectoryPort = Depends(get_store_directory),
) -> AuthorizationContext:
    try:
        return resolve_authorization_context(directory, user_id)
    except SchedulingError as e:
        raise _http_error(e)


@router.get("/available-slots/{store_id}/{service_id}", response_model=list[TimeSlotSchema])
def list_available_slots(
    store_id: str,
    service_id: str,
    date: str = Query(..., description="YYYY-MM-DD"),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.list_available_slots(store_id, service_id, date)
    except SchedulingError as e:
        raise _http_error(e)
    return [TimeSlotSchema.from_slot(slot) for slot in slots]


@router.post("", response_model=AppointmentSchema, status_code=201)
def create_appointment(
    req: CreateAppointmentSchema,
    ctx: AuthorizationContext = Depends(get_auth_context),
    uc: AppointmentLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    try:
        require_client(ctx)
        appointment = uc.create(
            store_id=req.store_id,
            service_id=req.service_id,
            client_id=ctx.user_id,
            start_time=req.start_time,
            notes=req.notes,
        )
    except SchedulingError as e:
        raise _http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.get("", response_model=list[AppointmentSchema])
def list_my_appointments(
    ctx: AuthorizationContext = Depends(get_auth_context),
    uc: AppointmentLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    return [AppointmentSchema.from_entity(a) for a in uc.list_for_client(ctx)]


@router.get("/store/{store_id}", response_model=list[AppointmentSchema])
def list_store_appointments(
    store_id: str,
    ctx: AuthorizationContext = Depends(get_auth_context),
    uc: AppointmentLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    try:
        appointments = uc.list_for_store(store_id, ctx)
    except SchedulingError as e:
        raise _http_error(e)
    return [AppointmentSchema.from_entity(a) for a in appointments]


@router.get("/{appointment_id}", response_model=AppointmentSchema)
def get_appointment(
    appointment_id: str,
    ctx: AuthorizationContext = Depends(get_auth_context),
    uc: AppointmentLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    try:
        appointment = uc.find(appointment_id, ctx)
    except SchedulingError as e:
        raise _http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.put("/{appointment_id}", response_model=AppointmentSchema)
def update_appointment(
    appointment_id: str,
    req: UpdateAppointmentSchema,
    ctx: AuthorizationContext = Depends(get_auth_context),
    uc: AppointmentLifecycleUseCase = Depends(get_lifecycle_use_case),
    tz: tzinfo = Depends(get_timezone),
):
    try:
        patch = AppointmentPatch(
            start_time=parse_instant(req.start_time, tz) if req.start_time is not None else None,
            status=req.status,
            notes=req.notes,
        )
        appointment = uc.update(appointment_id, patch, ctx)
    except SchedulingError as e:
        raise _http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.post("/{appointment_id}/cancel", response_model=AppointmentSchema)
def cancel_appointment(
    appointment_id: str,
    ctx: AuthorizationContext = Depends(get_auth_context),
    uc: AppointmentLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    try:
        appointment = uc.cancel(appointment_id, ctx)
    except SchedulingError as e:
        raise _http_error(e)
    return AppointmentSchema.from_entity(appointment)


@router.delete("/{appointment_id}", status_code=204)
def delete_appointment(
    appointment_id: str,
    ctx: AuthorizationContext = Depends(get_auth_context),
    uc: AppointmentLifecycleUseCase = Depends(get_lifecycle_use_case),
) -> Response:
    try:
        uc.delete(appointment_id, ctx)
    except SchedulingError as e:
        raise _http_error(e)
    return Response(status_code=204)
