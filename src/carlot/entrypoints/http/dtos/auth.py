from pydantic import BaseModel, Field


class SignUpRequestDTO(BaseModel):
    email: str = Field(examples=["dealer@example.com"])
    password: str
    full_name: str = Field(examples=["Ravi Motors"])
    phone: str | None = Field(default=None, examples=["+91 98200 00000"])


class SignInRequestDTO(BaseModel):
    email: str = Field(examples=["dealer@example.com"])
    password: str


class RefreshRequestDTO(BaseModel):
    refresh_token: str


class SessionResponseDTO(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: str
    user_id: str
    email: str
