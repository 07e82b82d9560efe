from .auth_router import router as auth_router
from .contact_router import router as contact_router
from .admin_router import router as admin_router

__all__ = ["auth_router", "contact_router", "admin_router"]
