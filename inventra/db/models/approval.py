import enum

from sqlalchemy import Enum


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Shared by purchase and sales orders so Postgres sees a single enum type.
approval_status_type = Enum(
    ApprovalStatus,
    name="approval_status_enum",
    values_callable=lambda e: [m.value for m in e],
)
