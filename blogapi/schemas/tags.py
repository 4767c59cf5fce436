from pydantic import BaseModel
from typing import Optional

class TagIn(BaseModel):
    name: Optional[str] = None

class TagRef(BaseModel):
    id: int
    name: str

class TagOut(TagRef):
    article_count: int = 0
