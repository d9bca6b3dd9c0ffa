# fanbase/database/settings_repository.py
import asyncpg
from typing import Optional
from datetime import datetime, timezone
import uuid
from fanbase.models import SiteSettings, EmailSignature

class SettingsRepository:
    """Single-row site settings and the email signature history"""

    def __init__(self, connection: asyncpg.Connection):
        self.conn = connection

    async def get_site_settings(self) -> Optional[SiteSettings]:
        row = await self.conn.fetchrow("""
            SELECT id, announcement_template, reminder_template, sold_out_template
            FROM site_settings ORDER BY updated_at DESC LIMIT 1
        """)
        return SiteSettings.model_validate(dict(row)) if row else None

    async def save_templates(self, templates: SiteSettings) -> SiteSettings:
        current = await self.get_site_settings()
        now = datetime.now(timezone.utc)
        if current is None:
            row = await self.conn.fetchrow("""
                INSERT INTO site_settings (id, announcement_template, reminder_template, sold_out_template, updated_at)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING id, announcement_template, reminder_template, sold_out_template
            """, str(uuid.uuid4()), templates.announcement_template,
                templates.reminder_template, templates.sold_out_template, now)
        else:
            row = await self.conn.fetchrow("""
                UPDATE site_settings
                   SET announcement_template = COALESCE($2, announcement_template),
                       reminder_template = COALESCE($3, reminder_template),
                       sold_out_template = COALESCE($4, sold_out_template),
                       updated_at = $5
                 WHERE id = $1
                RETURNING id, announcement_template, reminder_template, sold_out_template
            """, current.id, templates.announcement_template,
                templates.reminder_template, templates.sold_out_template, now)
        return SiteSettings.model_validate(dict(row))

    async def get_signature(self) -> Optional[EmailSignature]:
        row = await self.conn.fetchrow("""
            SELECT id, logo_url, content, updated_at
            FROM email_signatures ORDER BY updated_at DESC LIMIT 1
        """)
        return EmailSignature.model_validate(dict(row)) if row else None

    async def save_signature(self, logo_url: Optional[str], content: Optional[str]) -> EmailSignature:
        row = await self.conn.fetchrow("""
            INSERT INTO email_signatures (id, logo_url, content, updated_at)
            VALUES ($1, $2, $3, $4)
            RETURNING id, logo_url, content, updated_at
        """, str(uuid.uuid4()), logo_url, content, datetime.now(timezone.utc))
        return EmailSignature.model_validate(dict(row))
