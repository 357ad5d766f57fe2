from rest_framework.permissions import BasePermission

from market.policy import Principal, policy


class OperationPermission(BasePermission):
    """Gate a view action through the listing access policy.

    Views declare `operations = {"<action>": Operation.X}`; actions without an
    entry are left to the view. A denial raises AccessDenied so the response
    carries the policy's error code.
    """

    def has_permission(self, request, view):
        operations = getattr(view, "operations", None) or {}
        operation = operations.get(getattr(view, "action", None))
        if operation is None:
            return True
        policy.authorize(Principal.from_user(request.user), operation)
        return True
