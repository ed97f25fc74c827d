from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StorageSettings(BaseModel):
    """
    Where per-user query results and CSV exports are kept, and who may use them.
    """
    data_dir: Path = Field(default=Path("data"), alias="dataDir")
    allowed_domains: List[str] = Field(
        default_factory=list,
        alias="allowedDomains",
        description="Email domains allowed to use the API. Empty means any domain."
    )
    user_header: str = Field(
        default="X-Auth-Request-Email",
        alias="userHeader",
        description="Request header carrying the authenticated user's email."
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("allowed_domains", mode="before")
    @classmethod
    def normalize_domains(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        return [d.strip().lower().lstrip("@") for d in v if d and d.strip()]

    def is_allowed(self, email: str) -> bool:
        if not self.allowed_domains:
            return True
        domain = email.rsplit("@", 1)[-1].lower() if "@" in email else ""
        return domain in self.allowed_domains
