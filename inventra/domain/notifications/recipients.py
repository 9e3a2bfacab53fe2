# inventra/domain/notifications/recipients.py
from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.tenancy import Role
from inventra.db.repositories.profiles import get_organization, list_profile_emails

NOTIFIED_ROLES = [Role.OWNER.value, Role.ADMIN.value]


@dataclass
class Recipients:
    org_name: str
    org_logo_url: str
    emails: List[str] = field(default_factory=list)


async def resolve_recipients(db: AsyncSession, tenant_id: UUID) -> Recipients:
    """Owner/admin emails of the tenant plus the organization contact, de-duplicated in order."""
    org = await get_organization(db, tenant_id)
    emails = await list_profile_emails(db, tenant_id, NOTIFIED_ROLES)
    if org is not None and org.email:
        emails.append(org.email)

    return Recipients(
        org_name=org.name if org is not None and org.name else "Organization",
        org_logo_url=org.logo_url if org is not None and org.logo_url else "",
        emails=list(dict.fromkeys(emails)),
    )
