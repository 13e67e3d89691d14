from .word import Word, WordCreate
from .review import Review, ReviewCreate, Rating
from .srs import SRS, StudyStats
from .study import StudyPhase
from .settings import AppSettings
from .generation import GeneratedWord, GenerateWordsRequest, GenerateWordsResponse
from .backup import ExportData

__all__ = [
    'Word', 'WordCreate', 'Review', 'ReviewCreate', 'Rating', 'SRS', 'StudyStats',
    'StudyPhase', 'AppSettings', 'GeneratedWord', 'GenerateWordsRequest',
    'GenerateWordsResponse', 'ExportData',
]
