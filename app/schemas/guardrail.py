from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class GuardrailTerms(BaseModel):
    target_company: str | None = Field(default=None, max_length=200)
    target_products: list[str] = Field(default_factory=list, max_length=50)
    blocked_terms: list[str] = Field(default_factory=list, max_length=100)

    @field_validator("target_products", "blocked_terms", mode="before")
    @classmethod
    def _coerce_term_list(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if item is not None and str(item).strip()]
        raise ValueError("expected a list of strings or a comma separated string")

    def all_terms(self) -> list[str]:
        terms = [self.target_company or "", *self.target_products, *self.blocked_terms]
        return [term.strip() for term in terms if term and term.strip()]

    def is_empty(self) -> bool:
        return not self.all_terms()


class SanitizedKeywords(BaseModel):
    usable_keywords: list[str] = Field(default_factory=list)
    blocked_keywords: list[str] = Field(default_factory=list)


class RewriteGuardResult(BaseModel):
    accepted: bool
    injected_terms: list[str] = Field(default_factory=list)
    blocked_keywords: list[str] = Field(default_factory=list)
