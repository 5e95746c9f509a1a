"""Staff roles and permission hierarchy for ConvoHub.

Role Hierarchy (descending permissions):
- OWNER: Everything an ADMIN can do, plus deleting the company
- ADMIN: Company settings, staff invitations, departments, shifts,
  AI agents, knowledge sources, social integrations, audit log
- EMPLOYEE: Conversations, customers, document uploads
- GUEST: Read-only access

Permission Matrix:
┌──────────────────────────┬───────┬───────┬──────────┬───────┐
│ Action                   │ OWNER │ ADMIN │ EMPLOYEE │ GUEST │
├──────────────────────────┼───────┼───────┼──────────┼───────┤
│ Delete Company           │   ✓   │       │          │       │
│ Manage Company / Staff   │   ✓   │   ✓   │          │       │
│ Connect Social Accounts  │   ✓   │   ✓   │          │       │
│ Handle Conversations     │   ✓   │   ✓   │    ✓     │       │
│ Upload Documents         │   ✓   │   ✓   │    ✓     │       │
│ Read Company Data        │   ✓   │   ✓   │    ✓     │   ✓   │
└──────────────────────────┴───────┴───────┴──────────┴───────┘
"""

from enum import Enum
from typing import Set


class UserRole(str, Enum):
    """Staff roles. Values are stored as TEXT in the database."""
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"
    GUEST = "GUEST"


# Each role includes permissions of all roles below it
ROLE_HIERARCHY = {
    UserRole.OWNER: {UserRole.OWNER, UserRole.ADMIN, UserRole.EMPLOYEE, UserRole.GUEST},
    UserRole.ADMIN: {UserRole.ADMIN, UserRole.EMPLOYEE, UserRole.GUEST},
    UserRole.EMPLOYEE: {UserRole.EMPLOYEE, UserRole.GUEST},
    UserRole.GUEST: {UserRole.GUEST},
}


def has_permission(user_role: UserRole, required_role: UserRole) -> bool:
    """Check if a user role satisfies a required minimum role.

    Examples:
        >>> has_permission(UserRole.OWNER, UserRole.ADMIN)
        True
        >>> has_permission(UserRole.GUEST, UserRole.EMPLOYEE)
        False
    """
    return required_role in ROLE_HIERARCHY.get(user_role, set())


def get_allowed_roles(required_role: UserRole) -> Set[UserRole]:
    """Get all roles that satisfy a required minimum role.

    Example:
        >>> sorted(r.value for r in get_allowed_roles(UserRole.ADMIN))
        ['ADMIN', 'OWNER']
    """
    return {role for role, permissions in ROLE_HIERARCHY.items() if required_role in permissions}
