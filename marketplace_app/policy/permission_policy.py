"""Pure permission matching over a role's held grants.

Loading is done by ``AuthorizationService``; this module only answers
"do these held grants satisfy these requirements" so it can be exercised
without a database.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Sequence

from models.enums import AccessLevel

# Held by super-admins: satisfies any required access level.
ANY_ACCESS = "*"


@dataclass(frozen=True)
class HeldPermission:
    name: str
    access: str


@dataclass(frozen=True)
class PermissionRequirement:
    name: str
    access: FrozenSet[str]

    @classmethod
    def of(
        cls, name: str, access: AccessLevel | str | Iterable[AccessLevel | str]
    ) -> "PermissionRequirement":
        if isinstance(access, (str, AccessLevel)):
            levels = [access]
        else:
            levels = list(access)
        return cls(
            name=name,
            access=frozenset(
                lvl.value if isinstance(lvl, AccessLevel) else str(lvl)
                for lvl in levels
            ),
        )

    def is_met_by(self, held: HeldPermission) -> bool:
        if held.name != self.name:
            return False
        return held.access == ANY_ACCESS or held.access in self.access


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    missing: List[PermissionRequirement] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.allowed


def match_permissions(
    held: Sequence[HeldPermission],
    required: Sequence[PermissionRequirement],
) -> Decision:
    if not required:
        return Decision(allowed=True)

    missing = [
        req for req in required if not any(req.is_met_by(grant) for grant in held)
    ]
    if not missing:
        return Decision(allowed=True)

    names = ", ".join(req.name for req in missing)
    levels = ", ".join(sorted({lvl for req in missing for lvl in req.access}))
    return Decision(
        allowed=False,
        reason=(
            f"You don't have the required permission ({names}) "
            f"or access level ({levels})"
        ),
        missing=missing,
    )
