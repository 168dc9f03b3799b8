from fastapi import Depends, HTTPException, Request, status
from storefront.products.constants import logger


def require_roles(*roles: str):
    """Route dependency: the token's roles claim must contain one of roles."""
    wanted = set(roles)

    async def _checker(request: Request):
        user_roles = set(getattr(request.state, "user_roles", None) or [])

        if not user_roles & wanted:
            logger.warning("authorization.denied", extra={
                "user_public_id": getattr(request.state, "user_public_id", None),
                "required": sorted(wanted),
            })
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,detail="User doesn't have the required role")

        return True

    return Depends(_checker)
