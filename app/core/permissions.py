from app.models.user import UserRole

_ANALYST = ["read:documents", "upload:documents", "use:ai"]
_SME = _ANALYST + ["validate:ai", "feedback:ai"]
_MANAGER = _SME + ["view:reports", "view:logs"]
_ADMIN = _MANAGER + ["manage:users"]

ROLE_PERMISSIONS: dict[UserRole, list[str]] = {
    UserRole.ANALYST: _ANALYST,
    UserRole.SME: _SME,
    UserRole.MANAGER: _MANAGER,
    UserRole.ADMIN: _ADMIN,
}

# Roles that see every document rather than only their own uploads
DOCUMENT_SUPERVISOR_ROLES = {UserRole.ADMIN, UserRole.MANAGER}


def permissions_for(role) -> list[str]:
    return list(ROLE_PERMISSIONS.get(UserRole(role), []))


def has_permission(user, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(UserRole(user.role), [])


def can_view_all_documents(user) -> bool:
    return UserRole(user.role) in DOCUMENT_SUPERVISOR_ROLES


def can_access_document(user, document) -> bool:
    return can_view_all_documents(user) or document.uploaded_by_id == user.id


def can_delete_document(user, document) -> bool:
    return UserRole(user.role) == UserRole.ADMIN or document.uploaded_by_id == user.id
