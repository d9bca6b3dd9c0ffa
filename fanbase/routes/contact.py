# fanbase/routes/contact.py
from fastapi import APIRouter, Depends, Form, Request
from typing import Optional
import logging
from fanbase.contact.service import ContactService, ContactSubmission
from fanbase.routes.dependencies import get_contact_service
from fanbase.utils.client_ip import get_client_ip

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["contact"])

@router.post("/contact")
async def submit_contact(
    request: Request,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    message: Optional[str] = Form(None),
    honeypot: Optional[str] = Form(None, alias="_honey"),
    website: Optional[str] = Form(None),
    service: ContactService = Depends(get_contact_service)
):
    """Accept a contact form submission"""
    submission = ContactSubmission(
        name=name,
        email=email,
        message=message,
        honeypot=honeypot,
        website=website
    )
    await service.submit(submission, get_client_ip(request))
    return {"success": True}
