from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base


class Organization(Base):
    __tablename__ = "organizations"

    """A tenant: the unit of data isolation and billing.

    The contact ``email`` is always added to the notification recipients of
    the tenant alongside its owner/admin profiles.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    website = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
