import logging
import smtplib
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.auth.admin_dependencies import get_current_admin_user
from app.core.exceptions import InternalError
from app.models.admin import Administrator
from app.models.contact import Contact
from app.schemas.contact_schemas import (
    ContactPriority,
    ContactReplySchema,
    ContactResponseSchema,
    ContactStatus,
    ContactUpdateSchema,
    PaginationSchema,
)
from app.services import get_contact_service, get_mailer
from app.services.contact_service import ContactService
from app.services.email_service import EmailNotConfigured, Mailer

logger = logging.getLogger("api.admin")

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin_user)],
)


def _serialize(contact: Contact) -> dict:
    return ContactResponseSchema.model_validate(contact).model_dump(by_alias=True, mode="json")


@router.get("/contacts", summary="Listar contatos")
def list_contacts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ContactStatus] = Query(None),
    priority: Optional[ContactPriority] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    contact_service: ContactService = Depends(get_contact_service),
):
    """
    Lista paginada, mais recentes primeiro. `search` procura (sem
    diferenciar maiúsculas) em nome, email, assunto, mensagem e empresa.
    """
    contacts, pagination = contact_service.list_contacts(
        page=page,
        limit=limit,
        status=status,
        priority=priority,
        search=search.strip() if search else None,
    )
    return {
        "success": True,
        "data": {
            "contacts": [_serialize(contact) for contact in contacts],
            "pagination": PaginationSchema(**pagination).model_dump(by_alias=True),
        },
    }


@router.get("/contacts/{contact_id}", summary="Obter contato")
def get_contact(
    contact_id: str,
    contact_service: ContactService = Depends(get_contact_service),
):
    contact = contact_service.open_contact(contact_id)
    return {"success": True, "data": _serialize(contact)}


@router.put("/contacts/{contact_id}", summary="Atualizar status, prioridade ou tags")
def update_contact(
    contact_id: str,
    update_data: ContactUpdateSchema,
    contact_service: ContactService = Depends(get_contact_service),
):
    contact = contact_service.update_contact(contact_id, update_data)
    return {
        "success": True,
        "message": "Contact updated successfully",
        "data": _serialize(contact),
    }


@router.post("/contacts/{contact_id}/reply", summary="Responder contato por e-mail")
def reply_to_contact(
    contact_id: str,
    reply_data: ContactReplySchema,
    current_admin: Administrator = Depends(get_current_admin_user),
    contact_service: ContactService = Depends(get_contact_service),
    mailer: Mailer = Depends(get_mailer),
):
    contact = contact_service.get_contact(contact_id)

    # Diferente da notificação, a resposta é enviada dentro da requisição: falha vira erro 500
    try:
        mailer.send_reply(
            ContactResponseSchema.model_validate(contact),
            reply_data.subject,
            reply_data.message,
            reply_to=current_admin.email,
        )
    except (EmailNotConfigured, smtplib.SMTPException, OSError):
        logger.exception("Failed to send reply for contact %s", contact_id)
        raise InternalError("Failed to send reply")

    contact_service.mark_replied(contact)
    return {"success": True, "message": "Reply sent successfully"}


@router.delete("/contacts/{contact_id}", summary="Excluir contato")
def delete_contact(
    contact_id: str,
    contact_service: ContactService = Depends(get_contact_service),
):
    contact_service.delete_contact(contact_id)
    return {"success": True, "message": "Contact deleted successfully"}
