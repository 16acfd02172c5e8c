from __future__ import annotations

import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _validate_env_var_name(value: str) -> str:
    name = (value or "").strip()
    if not _ENV_NAME_RE.fullmatch(name):
        raise ValueError("must be a valid environment variable name")
    return name


NonNegativeInt = Annotated[int, Field(ge=0)]


class ScrapeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: str = "https://www.instagram.com"
    include_has_stories: bool = False
    # 0 disables the corresponding enrichment list
    following_limit: NonNegativeInt = 0
    followed_by_limit: NonNegativeInt = 0
    liked_by_limit: NonNegativeInt = 0

    @field_validator("base_url")
    @classmethod
    def _base_url_must_be_http(cls, v: str) -> str:
        url = (v or "").strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ValueError("must be an absolute http(s) URL")
        return url


class QueryIdsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    profile_public_stories: str = "bf41e22b1c4ba4c9f31b844ebb7d9056"

    @field_validator("profile_public_stories")
    @classmethod
    def _query_id_must_be_set(cls, v: str) -> str:
        qid = (v or "").strip()
        if not qid:
            raise ValueError("must be a non-empty query id")
        return qid


class ApifyConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    token_env: str = "APIFY_TOKEN"
    dataset_id: str | None = None

    @field_validator("token_env")
    @classmethod
    def _token_env_must_be_valid(cls, v: str) -> str:
        return _validate_env_var_name(v)

    @field_validator("dataset_id")
    @classmethod
    def _blank_dataset_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    scrape: ScrapeConfig = Field(default_factory=ScrapeConfig)
    query_ids: QueryIdsConfig = Field(default_factory=QueryIdsConfig)
    apify: ApifyConfig = Field(default_factory=ApifyConfig)
