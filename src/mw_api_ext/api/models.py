"""
API Models

Pydantic request/response models for the HTTP facade over
``ApiExtensions``.
"""

from __future__ import annotations

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, ConfigDict


# ---------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------

class EditPageRequest(BaseModel):
    """
    Edit request payload.

    ``params`` carries any further ``action=edit`` parameters
    (``minor``, ``section``, ``basetimestamp`` ...).
    """
    title: Optional[str] = None
    text: Optional[str] = None
    summary: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    def to_edit_info(self) -> Dict[str, Any]:
        info = {k: v for k, v in self.params.items() if k not in ("done", "token")}
        for key in ("title", "text", "summary"):
            value = getattr(self, key)
            if value is not None:
                info[key] = value
        return info


class EditPageResponse(BaseModel):
    edit: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------

class PageTextResponse(BaseModel):
    title: str = Field(..., min_length=1)
    text: Optional[str] = None
    exists: bool

    model_config = ConfigDict(extra="forbid")


class GroupUsersResponse(BaseModel):
    group: str = Field(..., min_length=1)
    users: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class EditCountResponse(BaseModel):
    user: str = Field(..., min_length=1)
    start: Optional[str] = None
    end: Optional[str] = None
    total: int = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid")
