# app/services/email_service.py
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.core.config import Settings
from app.schemas.contact_schemas import ContactResponseSchema

logger = logging.getLogger("api.email")


class EmailNotConfigured(RuntimeError):
    pass


class Mailer:
    """
    Cliente SMTP da aplicação. Criado no startup e guardado em app.state.mailer.
    Uma conexão é aberta por envio.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        admin_email: Optional[str] = None,
        admin_panel_url: Optional[str] = None,
        company_name: str = "",
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.admin_email = admin_email
        self.admin_panel_url = admin_panel_url
        self.company_name = company_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            admin_email=settings.ADMIN_EMAIL,
            admin_panel_url=settings.ADMIN_PANEL_URL,
            company_name=settings.COMPANY_NAME,
            timeout=settings.SMTP_TIMEOUT,
        )

    @property
    def can_send(self) -> bool:
        return bool(self.username)

    @property
    def can_notify(self) -> bool:
        return bool(self.username and self.admin_email)

    def send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    def send_notification(self, contact: ContactResponseSchema) -> bool:
        """
        Avisa o administrador sobre uma nova mensagem.
        Sem configuração de e-mail o envio é ignorado.
        """
        if not self.can_notify:
            logger.info("Email configuration not found, skipping notification")
            return False

        lines = [
            "New contact form submission",
            "",
            f"Name: {contact.name}",
            f"Email: {contact.email}",
        ]
        if contact.phone:
            lines.append(f"Phone: {contact.phone}")
        if contact.company:
            lines.append(f"Company: {contact.company}")
        lines += [
            f"Subject: {contact.subject or 'No subject'}",
            f"Submitted: {contact.created_at.isoformat()}Z",
            "",
            "Message:",
            contact.message,
        ]
        if self.admin_panel_url:
            lines += ["", f"View in admin panel: {self.admin_panel_url}"]

        message = EmailMessage()
        message["From"] = self.username
        message["To"] = self.admin_email
        message["Subject"] = f"New Contact Form Submission - {contact.subject or 'No Subject'}"
        message.set_content("\n".join(lines))

        self.send(message)
        logger.info("Notification email sent for contact %s", contact.id)
        return True

    def dispatch_notification(self, contact: ContactResponseSchema) -> None:
        """
        Executado em background depois da resposta; falhas só são registradas.
        """
        try:
            self.send_notification(contact)
        except Exception:
            logger.exception("Failed to send notification email for contact %s", contact.id)

    def send_reply(
        self,
        contact: ContactResponseSchema,
        subject: str,
        body: str,
        reply_to: Optional[str] = None,
    ) -> None:
        if not self.can_send:
            raise EmailNotConfigured("Email configuration not found")

        text = "\n".join([
            f"Hello {contact.name},",
            "",
            "Thank you for contacting us. Here's our response to your inquiry:",
            "",
            body,
            "",
            "--",
            self.company_name,
        ])

        message = EmailMessage()
        message["From"] = self.username
        message["To"] = contact.email
        message["Subject"] = f"Re: {subject}"
        if reply_to:
            message["Reply-To"] = reply_to
        message.set_content(text)

        self.send(message)
        logger.info("Reply email sent to %s for contact %s", contact.email, contact.id)
