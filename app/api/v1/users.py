# app/api/v1/users.py
from fastapi import APIRouter, Depends
from core.auth import Authed
from core.roles import require_admin
from schemas.users import UserCreateIn, UserOut, UserUpdateIn
from services import users_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])

@router.get("", response_model=list[UserOut])
def users_list(auth: Authed = Depends(require_admin)):
    return users_service.list_users()

@router.get("/{user_id}", response_model=UserOut)
def users_get(user_id: int, auth: Authed = Depends(require_admin)):
    return users_service.get_user(user_id)

@router.post("", response_model=UserOut, status_code=201)
def users_create(p: UserCreateIn, auth: Authed = Depends(require_admin)):
    return users_service.create_user(
        username=p.username,
        password=p.password,
        email=p.email,
        display_name=p.display_name,
        role=p.role.value,
        actor_id=auth.user_id,
    )

@router.patch("/{user_id}", response_model=UserOut)
def users_update(user_id: int, p: UserUpdateIn, auth: Authed = Depends(require_admin)):
    return users_service.update_user(user_id, p, actor_id=auth.user_id)

@router.delete("/{user_id}")
def users_delete(user_id: int, auth: Authed = Depends(require_admin)):
    users_service.delete_user(user_id, actor_id=auth.user_id)
    return {"ok": True}
