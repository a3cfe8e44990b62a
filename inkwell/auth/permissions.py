"""Console access control."""

from typing import Annotated

from fastapi import Depends

from inkwell.configs import ADMIN_ROLE
from inkwell.dependencies import get_current_user
from inkwell.errors import ForbiddenError
from inkwell.models import UserDB


async def require_admin(user: Annotated[UserDB, Depends(get_current_user)]) -> UserDB:
    """
    Require the session user to hold ``adminRole``.

    Raises:
        NotAuthenticatedError: If nobody is logged in (401)
        ForbiddenError: If the user is not an administrator (403)
    """
    if user.role != ADMIN_ROLE:
        raise ForbiddenError
    return user


AdminDep = Annotated[UserDB, Depends(require_admin)]
