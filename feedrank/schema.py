from pydantic import BaseModel
from typing import Optional

from .config import DEFAULT_USER

class InterestingIn(BaseModel):
    link: str
    user: str = DEFAULT_USER
    title: Optional[str] = None        # falls back to the cached article
    description: Optional[str] = None

class ReadIn(BaseModel):
    link: str
    user: str = DEFAULT_USER

class FeedIn(BaseModel):
    url: str
