# fanbase/notifications/signature.py
import html
from dataclasses import dataclass, field
from typing import List, Optional
from fanbase.config import settings
from fanbase.models import EmailSignature
from fanbase.services.email_service import InlineImage
from fanbase.services.storage_service import decode_data_url

SIGNATURE_LOGO_CID = "signature-logo"
LOGO_STYLE = "max-width: 150px; max-height: 60px; object-fit: contain; margin-bottom: 10px; display: block;"

@dataclass
class SignatureBlock:
    html: str
    inline_images: List[InlineImage] = field(default_factory=list)

def default_signature_html() -> str:
    return f"""
<div style="font-family: Arial, sans-serif; color: #666;">
    <p style="margin: 0;"><strong>Best regards,</strong></p>
    <p style="margin: 5px 0 0 0;">{html.escape(settings.artist_name)} Team</p>
    <p style="margin: 5px 0 0 0;"><a href="{html.escape(settings.site_url)}" style="color: #E8795E;">{html.escape(settings.site_url)}</a></p>
</div>
"""

def build_signature(signature: Optional[EmailSignature]) -> SignatureBlock:
    """Signature HTML plus the inline logo it references, if any"""
    if signature is None:
        return SignatureBlock(html=default_signature_html())

    parts = []
    images = []
    logo = signature.logo_url
    if logo and logo.startswith("data:"):
        decoded = decode_data_url(logo)
        if decoded:
            subtype, data = decoded
            images.append(InlineImage(content_id=SIGNATURE_LOGO_CID, data=data, subtype=subtype))
            parts.append(f'<img src="cid:{SIGNATURE_LOGO_CID}" alt="Logo" style="{LOGO_STYLE}" />')
    elif logo:
        parts.append(f'<img src="{html.escape(logo)}" alt="Logo" style="{LOGO_STYLE}" />')

    parts.append(signature.content or "")
    return SignatureBlock(html="".join(parts), inline_images=images)

def preview_signature_html(signature: Optional[EmailSignature]) -> str:
    """Signature as shown in the admin UI, with the logo inlined as its data URL"""
    block = build_signature(signature)
    if signature and signature.logo_url and block.inline_images:
        return block.html.replace(f"cid:{SIGNATURE_LOGO_CID}", html.escape(signature.logo_url))
    return block.html

def compose_body(body: str, signature: SignatureBlock) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; line-height: 1.6;">
    {body}
    <hr style="margin: 20px 0; border: none; border-top: 1px solid #ddd;" />
    {signature.html}
</div>
"""

def unsubscribe_footer(token: str) -> str:
    link = f"{settings.site_url.rstrip('/')}/unsubscribe/{token}"
    return f"""
<div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #eee; text-align: center; font-size: 12px; color: #888;">
    <p>You're receiving this because you subscribed to event alerts.</p>
    <p><a href="{link}" style="color: #888;">Unsubscribe</a> from future emails</p>
</div>
"""
