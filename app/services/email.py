import aiosmtplib
from email.message import EmailMessage
from app.core.config import settings


async def send_email(to_email: str, subject: str, body: str, is_html: bool = False):
    message = EmailMessage()
    message["From"] = settings.MAIL_FROM
    message["To"] = to_email
    message["Subject"] = subject
    if is_html:
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(body, subtype="html")
    else:
        message.set_content(body)

    await aiosmtplib.send(
        message,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        start_tls=True,
        username=settings.MAIL_FROM,
        password=settings.MAIL_PASSWORD,
    )
