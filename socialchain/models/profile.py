"""Profile record model."""

from pydantic import BaseModel, Field, computed_field

from socialchain.models.address import Address


class Profile(BaseModel):
    """Follow list stored in an identity's profile account."""

    follows: list[Address] = Field(default_factory=list)

    @computed_field
    @property
    def follow_count(self) -> int:
        return len(self.follows)
