"""Role gates shared by the order, finance and report views."""

from rest_framework.response import Response

DISPATCH_ROLES = ("DISPATCHER", "MANAGER", "ADMIN")
FINANCE_ROLES  = ("ACCOUNTANT", "MANAGER", "ADMIN")
DELETE_ROLES   = ("MANAGER", "ADMIN")
REPORT_ROLES   = ("ACCOUNTANT", "MANAGER", "ADMIN")


def require_role(request, roles, label=None):
    """Return a 403 Response when the caller lacks one of ``roles``, else None."""
    if request.user.has_role(*roles):
        return None
    label = label or " or ".join(roles)
    return Response({"error": f"Requires {label} role.", "code": "forbidden"}, status=403)
