"""Data models for remote release and commit records."""

from pydantic import BaseModel


class Release(BaseModel):
    tag_name: str
    draft: bool = False


class Commit(BaseModel):
    sha: str
