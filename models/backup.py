from pydantic import BaseModel
from typing import List

from .word import Word
from .review import Review
from .srs import SRS

class ExportData(BaseModel):
    """Full snapshot of the store, as written by export and accepted by import."""
    words: List[Word]
    reviews: List[Review] = []
    srs: List[SRS] = []
