from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel, Session, create_engine

from . import config


KNOWLEDGE_KIND = "knowledge"


class Item(SQLModel):
    name: str = ""
    kind: str = "technique"
    required: bool = True
    show_title: bool = True
    description: Optional[str] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration: Optional[str] = None
    distance: Optional[str] = None
    time_limit: Optional[str] = None
    time_limit_operator: Optional[str] = None
    video_url: Optional[str] = None

    @property
    def is_knowledge(self) -> bool:
        return self.kind == KNOWLEDGE_KIND


class Category(SQLModel):
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    sort_order: int = 0
    items: List[Item] = Field(default_factory=list)

    @property
    def is_knowledge(self) -> bool:
        return bool(self.items) and all(item.is_knowledge for item in self.items)

    @property
    def is_table(self) -> bool:
        return bool(self.items) and not self.is_knowledge


class GymInfo(SQLModel):
    name: str = ""
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None

    @property
    def city_line(self) -> str:
        return ", ".join(part for part in (self.city, self.state, self.zip_code) if part)


class RankCurriculum(SQLModel):
    rank_name: str
    belt_color: str = "#ffffff"
    categories: List[Category] = Field(default_factory=list)


class CurriculumExport(SQLModel):
    style_name: str
    gym: GymInfo = Field(default_factory=GymInfo)
    ranks: List[RankCurriculum] = Field(default_factory=list)


class CurriculumDocument(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    style_name: str = Field(index=True)
    rank_name: str
    path: str
    page_count: int = 1
    created_at: datetime = Field(default_factory=datetime.utcnow)


def format_phone(phone: str) -> str:
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits[0] == "1":
        return f"({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    return phone


engine = create_engine(f"sqlite:///{config.DB_PATH}")


def reset_engine() -> None:
    global engine
    engine = create_engine(f"sqlite:///{config.DB_PATH}")


def init_db() -> None:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
