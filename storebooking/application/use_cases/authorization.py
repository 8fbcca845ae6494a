from __future__ import annotations

from storebooking.application.exceptions import BadRequestError, ForbiddenError, NotFoundError
from storebooking.application.ports.store_directory import StoreDirectoryPort
from storebooking.domain.entities.appointment import Appointment
from storebooking.domain.entities.auth_context import AuthorizationContext
from storebooking.domain.entities.user import UserRole


def resolve_authorization_context(directory: StoreDirectoryPort, user_id: str) -> AuthorizationContext:
    """Load the caller once: role plus, for providers, the store they operate."""
    user = directory.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    owned_store_id = None
    if user.role == UserRole.PROVIDER:
        store = directory.find_store_by_owner(user.id)
        owned_store_id = store.id if store else None

    return AuthorizationContext(user_id=user.id, role=user.role, owned_store_id=owned_store_id)


def is_appointment_client(ctx: AuthorizationContext, appointment: Appointment) -> bool:
    return appointment.client_id == ctx.user_id


def is_appointment_store_operator(ctx: AuthorizationContext, appointment: Appointment) -> bool:
    return ctx.operates_store(appointment.store_id)


def can_read(ctx: AuthorizationContext, appointment: Appointment) -> bool:
    return is_appointment_client(ctx, appointment) or is_appointment_store_operator(ctx, appointment)


def can_modify(ctx: AuthorizationContext, appointment: Appointment) -> bool:
    return can_read(ctx, appointment)


def can_delete(ctx: AuthorizationContext, appointment: Appointment) -> bool:
    return is_appointment_client(ctx, appointment)


def require_client(ctx: AuthorizationContext) -> None:
    if ctx.role != UserRole.CLIENT:
        raise BadRequestError("Only clients can create appointments")


def require_read(ctx: AuthorizationContext, appointment: Appointment) -> None:
    if is_appointment_client(ctx, appointment):
        return
    if ctx.role == UserRole.PROVIDER:
        if not is_appointment_store_operator(ctx, appointment):
            raise ForbiddenError("You can only view appointments from your own store")
        return
    raise ForbiddenError("You can only view your own appointments")


def require_store_operator(ctx: AuthorizationContext, store_id: str) -> None:
    if not ctx.operates_store(store_id):
        raise ForbiddenError("You can only view appointments from your own store")
