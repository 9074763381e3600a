"""Permission Enforcement: default Authorizer requiring an identified caller."""

from tempsched.core.domain_types import Caller
from tempsched.core.errors import PermissionDeniedError


class RequireAuthenticatedUser:
    """Accept any caller that carries a user id."""

    def check(self, caller: Caller) -> None:
        if not caller.user_id:
            raise PermissionDeniedError("an authenticated user is required")
