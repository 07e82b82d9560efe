# app/routers/auth_router.py
from fastapi import APIRouter, Depends, status

from app.auth.admin_dependencies import (
    get_admin_service,
    get_current_admin_user,
    get_current_super_admin_user,
    get_token_handler,
)
from app.auth.admin_jwt_handler import AdminTokenHandler
from app.models.admin import Administrator
from app.schemas.admin_schemas import (
    AdminCreateSchema,
    AdminLoginInfoSchema,
    AdminLoginSchema,
    AdminProfileSchema,
    AdminSummarySchema,
    ChangePasswordSchema,
)
from app.services.admin_service import AdminService

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={401: {"description": "Não autorizado"}},
)


def _dump(schema_cls, admin: Administrator) -> dict:
    return schema_cls.model_validate(admin).model_dump(by_alias=True, mode="json")


@router.post("/login", summary="Login de administrador")
def login(
    login_data: AdminLoginSchema,
    admin_service: AdminService = Depends(get_admin_service),
    token_handler: AdminTokenHandler = Depends(get_token_handler),
):
    """
    Autentica por username ou email e retorna o token de sessão.
    """
    admin = admin_service.authenticate(login_data.username, login_data.password)
    token = token_handler.create_access_token(admin.id, admin.username, admin.role)

    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "admin": _dump(AdminLoginInfoSchema, admin),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Criar administrador")
def register(
    admin_data: AdminCreateSchema,
    current_admin: Administrator = Depends(get_current_super_admin_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    """
    Somente super administradores podem criar novas contas.
    """
    admin = admin_service.create_admin(admin_data)
    return {
        "success": True,
        "message": "Admin created successfully",
        "admin": _dump(AdminSummarySchema, admin),
    }


@router.get("/me", summary="Perfil do administrador atual")
def read_me(current_admin: Administrator = Depends(get_current_admin_user)):
    return {
        "success": True,
        "admin": _dump(AdminProfileSchema, current_admin),
    }


@router.put("/change-password", summary="Alterar senha")
def change_password(
    password_data: ChangePasswordSchema,
    current_admin: Administrator = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service),
):
    admin_service.change_password(
        current_admin.id,
        password_data.current_password,
        password_data.new_password,
    )
    return {"success": True, "message": "Password changed successfully"}


@router.post("/logout", summary="Logout")
def logout(current_admin: Administrator = Depends(get_current_admin_user)):
    # Sem estado no servidor: o cliente apenas descarta o token
    return {"success": True, "message": "Logout successful"}
