import enum
from dataclasses import dataclass
from uuid import UUID


class Role(str, enum.Enum):
    """Membership role inside a tenant. Each role holds every privilege of the roles below it."""

    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def satisfies(self, required: "Role") -> bool:
        return self.rank >= required.rank

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        # profiles without an explicit role are treated as staff
        if not value:
            return cls.STAFF
        return cls(value.lower())


_RANKS = {Role.STAFF: 0, Role.MANAGER: 1, Role.ADMIN: 2, Role.OWNER: 3}


@dataclass(frozen=True)
class TenantContext:
    """Authenticated caller scope handed to every repository and service call."""

    tenant_id: UUID
    actor_id: UUID
    role: Role

    def can(self, required: Role) -> bool:
        return self.role.satisfies(required)
