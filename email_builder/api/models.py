"""Pydantic models for the FastAPI boundary."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

SLUG_RE = re.compile(r"^[a-z0-9-]+$")


def _check_slug(value: Optional[str]) -> Optional[str]:
    if value is not None and not SLUG_RE.match(value):
        raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens")
    return value


def _check_configuration(value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if value is not None and "root" not in value:
        raise ValueError("Configuration must have a root block")
    return value


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    configuration: Dict[str, Any]

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return _check_slug(v)

    @field_validator("configuration")
    @classmethod
    def validate_configuration(cls, v):
        return _check_configuration(v)


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    configuration: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return _check_slug(v)

    @field_validator("configuration")
    @classmethod
    def validate_configuration(cls, v):
        return _check_configuration(v)

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent. Only ``description`` may be cleared with null."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }


class TemplateListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    created_by: Optional[str] = None
    is_active: bool

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.isoformat(timespec="milliseconds") + "Z"


class TemplateResponse(TemplateListItem):
    configuration: Dict[str, Any]


class RenderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document: Dict[str, Any]
    root_block_id: str = Field(default="root", alias="rootBlockId")
