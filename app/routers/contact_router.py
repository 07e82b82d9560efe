# app/routers/contact_router.py
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from slowapi.util import get_remote_address

from app.core.database import utcnow
from app.core.exceptions import ValidationError
from app.schemas.contact_schemas import ContactCreateSchema, ContactResponseSchema, ContactVerifySchema
from app.services import get_contact_service, get_mailer, get_submission_guard
from app.services.contact_service import ContactService
from app.services.email_service import Mailer
from app.services.submission_guard import SubmissionGuard

router = APIRouter(
    prefix="/contact",
    tags=["Contact"],
)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Enviar formulário de contato")
def submit_contact(
    contact_data: ContactCreateSchema,
    request: Request,
    background_tasks: BackgroundTasks,
    guard: SubmissionGuard = Depends(get_submission_guard),
    contact_service: ContactService = Depends(get_contact_service),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Recebe uma mensagem do site. Limite por IP e envio duplicado são
    verificados antes de gravar; a notificação por e-mail roda em
    background depois da resposta.
    """
    ip_address = get_remote_address(request)
    guard.check(contact_data.email, contact_data.message, ip_address, now=utcnow())

    contact = contact_service.create_contact(
        contact_data,
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent"),
    )

    background_tasks.add_task(mailer.dispatch_notification, ContactResponseSchema.model_validate(contact))

    return {
        "success": True,
        "message": "Thank you for your message! We will get back to you soon.",
        "data": {
            "id": contact.id,
            "submittedAt": contact.created_at.isoformat(),
        },
    }


@router.get("/stats", summary="Estatísticas públicas de contatos")
def contact_stats(contact_service: ContactService = Depends(get_contact_service)):
    stats = contact_service.get_public_stats()
    return {
        "success": True,
        "data": {
            "totalSubmissions": stats["total_submissions"],
            "todaySubmissions": stats["today_submissions"],
        },
    }


@router.post("/verify", summary="Verificar se um envio existe")
def verify_contact(
    verify_data: ContactVerifySchema,
    contact_service: ContactService = Depends(get_contact_service),
):
    if not verify_data.contact_id:
        raise ValidationError("Contact ID is required")

    contact = contact_service.get_contact(verify_data.contact_id, message="Contact submission not found")
    return {
        "success": True,
        "data": {
            "id": contact.id,
            "status": contact.status,
            "submittedAt": contact.created_at.isoformat(),
        },
    }
