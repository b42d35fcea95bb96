"""
Authentication Models

Identity of an HTTP caller after inbound JWT verification.
"""

from typing import Iterable, List
from pydantic import BaseModel, Field, ConfigDict


class CallerContext(BaseModel):
    """
    Verified caller of the page and user routes.

    ``page_read`` unlocks page text, group members and edit counts;
    ``page_write`` unlocks editing.
    """

    username: str = Field(..., min_length=1, description="Wiki username the caller acts for.")
    scopes: List[str] = Field(default_factory=list)
    client_id: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def missing_scopes(self, required: Iterable[str]) -> List[str]:
        return [scope for scope in required if scope not in self.scopes]
