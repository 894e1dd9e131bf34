from pydantic import BaseModel, ConfigDict, Field


class AuthUserModel(BaseModel):
    username: str | None = None
    password: str | None = None


class AuthCheckModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_authenticated: bool = Field(..., alias="isAuthenticated")
    username: str | None = None
