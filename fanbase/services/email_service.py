# fanbase/services/email_service.py - AWS SES transport
import boto3
from botocore.exceptions import ClientError
from dataclasses import dataclass, field
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.mime.image import MIMEImage
from email.utils import formataddr
from typing import Optional, List
from fanbase.config import settings
import logging
import asyncio
from concurrent.futures import ThreadPoolExecutor

logger = logging.getLogger(__name__)

@dataclass
class InlineImage:
    """Image embedded in the HTML body and referenced as cid:<content_id>"""
    content_id: str
    data: bytes
    subtype: str = "png"

@dataclass
class SendResult:
    success: bool
    to_email: str
    message_id: Optional[str] = None
    error: Optional[str] = None

@dataclass
class OutgoingEmail:
    to_email: str
    subject: str
    html_content: str
    inline_images: List[InlineImage] = field(default_factory=list)
    reply_to: Optional[str] = None

class EmailService:
    def __init__(self):
        self.ses_client = boto3.client('sesv2', region_name=settings.aws_region)
        self.from_email = settings.from_email
        self.from_name = settings.from_name
        self.support_email = settings.support_email
        self.executor = ThreadPoolExecutor(max_workers=5)
        logger.info(f"Email service initialized for region {settings.aws_region}")

    async def send(self, email: OutgoingEmail) -> SendResult:
        """Send one email; transport failures come back as an unsuccessful result"""
        loop = asyncio.get_running_loop()
        try:
            # Run SES call in thread pool to avoid blocking
            message_id = await loop.run_in_executor(self.executor, self._send_email_ses, email)
            logger.info(f"Email sent to {email.to_email} (message id {message_id})")
            return SendResult(success=True, to_email=email.to_email, message_id=message_id)
        except ValueError as e:
            logger.error(f"Email to {email.to_email} failed: {e}")
            return SendResult(success=False, to_email=email.to_email, error=str(e))

    def build_mime(self, email: OutgoingEmail) -> MIMEMultipart:
        message = MIMEMultipart("related")
        message["Subject"] = email.subject
        message["From"] = formataddr((self.from_name, self.from_email))
        message["To"] = email.to_email
        message["Reply-To"] = email.reply_to or self.support_email

        message.attach(MIMEText(email.html_content, "html", "utf-8"))
        for image in email.inline_images:
            part = MIMEImage(image.data, _subtype=image.subtype)
            part.add_header("Content-ID", f"<{image.content_id}>")
            part.add_header("Content-Disposition", "inline", filename=f"{image.content_id}.{image.subtype}")
            message.attach(part)
        return message

    def _send_email_ses(self, email: OutgoingEmail) -> Optional[str]:
        """Send a raw MIME message through SES v2"""
        email_params = {
            'FromEmailAddress': formataddr((self.from_name, self.from_email)),
            'Destination': {
                'ToAddresses': [email.to_email]
            },
            'Content': {
                'Raw': {
                    'Data': self.build_mime(email).as_bytes()
                }
            },
        }
        if settings.ses_configuration_set:
            email_params['ConfigurationSetName'] = settings.ses_configuration_set

        try:
            response = self.ses_client.send_email(**email_params)
            return response.get('MessageId')

        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            logger.error(f"SES error {error_code} sending to {email.to_email}: {error_message}")

            if error_code == 'MessageRejected':
                raise ValueError(f"Email rejected: {error_message}")
            elif error_code == 'MailFromDomainNotVerifiedException':
                raise ValueError("Sender domain not verified with AWS SES")
            elif error_code in ('SendingPausedException', 'AccountSuspendedException'):
                raise ValueError("SES sending is paused - check your account status")
            else:
                raise ValueError(f"Email delivery failed: {error_message}")

        except Exception as e:
            logger.error(f"Unexpected error sending to {email.to_email}: {e!r}")
            raise ValueError(f"Email sending failed: {e}")

# Global instance
email_service = EmailService()

def get_email_service() -> EmailService:
    return email_service
