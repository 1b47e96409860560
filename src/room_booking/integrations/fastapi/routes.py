from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from ...domain.entities import AccessContext
from .deps import FastAPIAuthorization
from .schemas import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ReservationRequest,
    ReservationResponse,
    ReservationUpdateRequest,
    RoomRequest,
    RoomResponse,
    TokenResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)

API_PREFIX = "/api/v1"


def build_routers(fastapi_auth: FastAPIAuthorization) -> list[APIRouter]:
    """
    Thin HTTP layer: every handler passes the caller's AccessContext to a
    use case explicitly. Handlers are plain `def` so blocking store calls run
    in the threadpool.
    """
    core = fastapi_auth.core
    CurrentUser = Annotated[AccessContext, Depends(fastapi_auth.get_current_user)]

    # ------------------------------------------------------------------ #
    # auth
    # ------------------------------------------------------------------ #

    auth_router = APIRouter(prefix=f"{API_PREFIX}/auth", tags=["auth"])

    @auth_router.post("/login", response_model=TokenResponse)
    def login(body: LoginRequest):
        return core.login(body.email, body.password)

    @auth_router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
    def register(body: RegisterRequest):
        return core.register_use_case.execute(
            email=body.email,
            password=body.password,
            name=body.name,
            phone=body.phone,
        )

    @auth_router.post("/refresh-token", response_model=TokenResponse)
    def refresh_token(body: RefreshTokenRequest):
        return core.refresh(body.refresh_token)

    @auth_router.get("/me", response_model=UserResponse)
    def me(current_user: CurrentUser):
        return current_user.user

    # ------------------------------------------------------------------ #
    # rooms
    # ------------------------------------------------------------------ #

    rooms_router = APIRouter(prefix=f"{API_PREFIX}/rooms", tags=["rooms"])

    @rooms_router.get("", response_model=list[RoomResponse])
    def list_rooms(current_user: CurrentUser):
        return core.rooms.list_all()

    @rooms_router.get("/{room_id}", response_model=RoomResponse)
    def get_room(room_id: int, current_user: CurrentUser):
        return core.rooms.get(room_id)

    @rooms_router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
    def create_room(body: RoomRequest, current_user: CurrentUser):
        return core.rooms.create(current_user, **body.model_dump())

    @rooms_router.put("/{room_id}", response_model=RoomResponse)
    def update_room(room_id: int, body: RoomRequest, current_user: CurrentUser):
        return core.rooms.update(current_user, room_id, **body.model_dump())

    @rooms_router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_room(room_id: int, current_user: CurrentUser):
        core.rooms.delete(current_user, room_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------ #
    # reservations
    # ------------------------------------------------------------------ #

    reservations_router = APIRouter(prefix=f"{API_PREFIX}/reservations", tags=["reservations"])

    @reservations_router.get("", response_model=list[ReservationResponse])
    def list_reservations(current_user: CurrentUser):
        return core.reservations.list_all(current_user)

    @reservations_router.get("/me", response_model=list[ReservationResponse])
    def list_my_reservations(current_user: CurrentUser):
        return core.reservations.list_mine(current_user)

    @reservations_router.get("/{reservation_id}", response_model=ReservationResponse)
    def get_reservation(reservation_id: int, current_user: CurrentUser):
        return core.reservations.get(current_user, reservation_id)

    @reservations_router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
    def create_reservation(body: ReservationRequest, current_user: CurrentUser):
        return core.reservations.create(current_user, body.room_id, body.start_time, body.end_time)

    @reservations_router.put("/{reservation_id}", response_model=ReservationResponse)
    def update_reservation(reservation_id: int, body: ReservationUpdateRequest, current_user: CurrentUser):
        return core.reservations.update(
            current_user,
            reservation_id,
            start=body.start_time,
            end=body.end_time,
        )

    @reservations_router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_reservation(reservation_id: int, current_user: CurrentUser):
        core.reservations.delete(current_user, reservation_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------ #
    # users
    # ------------------------------------------------------------------ #

    users_router = APIRouter(prefix=f"{API_PREFIX}/users", tags=["users"])

    @users_router.get("", response_model=list[UserResponse])
    def list_users(current_user: CurrentUser):
        return core.users.list_all(current_user)

    @users_router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
    def create_user(body: UserCreateRequest, current_user: CurrentUser):
        return core.users.create(current_user, **body.model_dump())

    @users_router.get("/{user_id}", response_model=UserResponse)
    def get_user(user_id: int, current_user: CurrentUser):
        return core.users.get(current_user, user_id)

    @users_router.put("/{user_id}", response_model=UserResponse)
    def update_user(user_id: int, body: UserUpdateRequest, current_user: CurrentUser):
        return core.users.update(current_user, user_id, **body.model_dump(exclude_none=True))

    @users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_user(user_id: int, current_user: CurrentUser):
        core.users.delete(current_user, user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return [auth_router, rooms_router, reservations_router, users_router]
