from pydantic import BaseModel, Field


class PlayerCreate(BaseModel):
    id: int
    name: str | None = None


class PlayerUpdate(BaseModel):
    name: str | None = None
    is_admin: bool | None = None
    currency: int | None = Field(default=None, ge=0)
