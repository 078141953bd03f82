from typing import Dict, List, Optional
from sqlmodel import SQLModel, Field, Column, JSON
from datetime import datetime, timezone

class ProfileRecord(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    interests: Dict[str, float] = Field(default_factory=dict, sa_column=Column(JSON))  # keyword -> weight
    read_articles: List[str] = Field(default_factory=list, sa_column=Column(JSON))     # links
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
