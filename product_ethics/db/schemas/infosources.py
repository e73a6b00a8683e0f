from typing import List, Optional
from pydantic import BaseModel, field_validator

from product_ethics.utils.urls import validate_domain


class InfoSourceCreate(BaseModel):
    name: Optional[str] = None
    domains: List[str]

    @field_validator("domains")
    @classmethod
    def _normalize_domains(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one domain is required")
        normalized = []
        for domain in v:
            d = validate_domain(domain)
            if d not in normalized:
                normalized.append(d)
        return normalized
