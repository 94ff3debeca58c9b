from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.resume import Bullet, JobBlock

SectionMode = Literal["heading", "heuristic", "none"]
ExtractionTier = Literal["experience", "full_text", "marked_lines", "sentences", "empty"]


class NormalizedLine(BaseModel):
    index: int
    text: str
    indented: bool = False


class ExperienceSlice(BaseModel):
    experience_text: str
    found_section: bool
    mode: SectionMode
    heading: str | None = None


class SegmentationResult(BaseModel):
    jobs: list[JobBlock] = Field(default_factory=list)
    bullets: list[Bullet] = Field(default_factory=list)


class BulletExtraction(BaseModel):
    jobs: list[JobBlock] = Field(default_factory=list)
    bullets: list[Bullet] = Field(default_factory=list)
    section: ExperienceSlice
    tier: ExtractionTier

    @property
    def bullet_texts(self) -> list[str]:
        return [bullet.text for bullet in self.bullets]

    @property
    def bullet_job_ids(self) -> list[str]:
        return [bullet.owner_job_id for bullet in self.bullets]
