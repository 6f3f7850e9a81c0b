"""
Request and response models for the catalog HTTP API.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, field_validator


class UserLite(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class UserCreatedArtist(BaseModel):
    name: str
    description: str = ""
    pictures: List[str] = []

    @field_validator('name')
    @classmethod
    def name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('name cannot be empty')
        return v


class UserEditedArtist(BaseModel):
    id: int
    name: str
    description: str
    pictures: List[str]

    @field_validator('name')
    @classmethod
    def name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('name cannot be empty')
        return v


class ArtistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    pictures: List[str]
    created_by_id: int
    created_at: datetime


class ArtistWithCreatorResponse(ArtistResponse):
    created_by: UserLite


class UserCreatedTorrentRequestComment(BaseModel):
    torrent_request_id: int
    content: str

    @field_validator('content')
    @classmethod
    def content_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('content cannot be empty')
        return v


class UserEditedTorrentRequestComment(BaseModel):
    id: int
    content: str

    @field_validator('content')
    @classmethod
    def content_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('content cannot be empty')
        return v


class TorrentRequestCommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    torrent_request_id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime


class TorrentRequestCommentHierarchy(TorrentRequestCommentResponse):
    created_by: UserLite


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool


class ErrorResponse(BaseModel):
    error: str
    message: str
