from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr


class CredentialsDTO(BaseModel):
    """Shape check only; presence and content rules live in the use cases."""

    username: StrictStr | None = None
    password: StrictStr | None = None

    model_config = ConfigDict(extra="ignore")


class RegisterRequestDTO(CredentialsDTO):
    pass


class LoginRequestDTO(CredentialsDTO):
    pass
