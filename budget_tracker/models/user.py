"""
User Credential Model

The credential is opaque to this package: the hashing scheme lives in
the login layer. We only need the username (to locate the data file)
and the serialized triple (to remove the user's credential line).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    """A registered user as stored in the shared credential file."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Login name, also used to name the user's data file"
    )
    password_hash: str = Field(
        default="",
        description="Opaque password hash"
    )
    salt: str = Field(
        default="",
        description="Opaque salt used with the hash"
    )

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Usernames name files and credential lines, so reject separators."""
        forbidden = {"/", "\\", ":", "\n", "\r"}
        if any(ch in v for ch in forbidden) or v in {".", ".."}:
            raise ValueError(f"Username contains forbidden characters: {v!r}")
        return v

    @property
    def credential_line(self) -> str:
        """The username:passwordHash:salt line stored in the credential file."""
        return f"{self.username}:{self.password_hash}:{self.salt}"

    def __str__(self) -> str:
        return f"User: {self.username}"
