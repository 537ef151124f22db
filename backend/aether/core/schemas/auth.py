from __future__ import annotations

from aether.core.models.base import AppBaseModel


class Identity(AppBaseModel):
    """Signed-in cloud user, validated from a Supabase JWT."""

    id: str
    email: str | None = None
    access_token: str | None = None
