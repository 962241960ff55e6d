"""Shared router dependencies."""

from fastapi import Header, HTTPException, status


async def get_user_id(
    x_user_id: str | None = Header(None, description="ID of the user owning the notes"),
) -> str:
    """Extract the user ID from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id
