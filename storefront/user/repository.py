import uuid
from typing import Optional
from fastapi import HTTPException,status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from storefront.schema.full_schema import Users
from storefront.user.constants import logger


def _as_uuid(user_pid) -> Optional[uuid.UUID]:
    if isinstance(user_pid, uuid.UUID):
        return user_pid
    try:
        return uuid.UUID(str(user_pid))
    except (ValueError, TypeError):
        return None


async def identify_user_by_pid(session,user_pid) -> Optional[int]:
    """Storage id of a live user from the public id carried in the token, or None."""
    pid = _as_uuid(user_pid)
    if pid is None:
        return None
    stmt=select(Users.id).where(Users.public_id==pid,Users.deleted_at.is_(None))
    res=await session.execute(stmt)
    user=res.first()
    return user[0] if user else None


async def user_exists(session,user_id) -> bool:
    stmt=select(Users.id).where(Users.id==user_id,Users.deleted_at.is_(None))
    res=await session.execute(stmt)
    return res.first() is not None


async def create_user(session,email:str,name:Optional[str]=None) -> Users:
    """Registration lives in the identity service; this exists for seeding and tooling."""
    user=Users(email=email,name=name)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning("user.create.duplicate_email", extra={"email": email})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")
    await session.refresh(user)
    return user
