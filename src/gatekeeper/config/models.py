from typing import Literal

from pydantic import BaseModel, Field


class CacheConfig(BaseModel):
    backend: Literal["memory", "sqlite", "none"] = "memory"
    path: str = ".gatekeeper/cache.db"
    default_ttl: float = Field(default=0, ge=0)


class PolicyConfig(BaseModel):
    path: str | None = None
    strict_permissions: bool = False


class GatekeeperConfig(BaseModel):
    role: str = ""
    cache: CacheConfig = Field(default_factory=CacheConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
