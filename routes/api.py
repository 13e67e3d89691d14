"""JSON endpoints mirroring what the pages do, for scripts and the browser."""
from fastapi import APIRouter, Body, Depends, HTTPException

from config import get_settings, load_config, save_settings
from db.database import get_db
from db import repository
from models.generation import GenerateWordsRequest, GenerateWordsResponse
from models.review import Rating
from models.settings import AppSettings
from models.srs import SRS, StudyStats
from utils.backup import BackupFormatError, parse_backup
from utils.grading import auto_rate
from utils.openrouter import WordGenerationError, generate_words
from utils.scheduler import get_next_word, get_study_stats, update_srs

router = APIRouter()

@router.post("/generate-words", response_model=GenerateWordsResponse)
async def generate_words_endpoint(payload: GenerateWordsRequest):
    """Generate word/hint pairs; the caller decides whether to store them."""
    try:
        words = generate_words(
            payload.prompt_template,
            seed=payload.seed,
            existing_words=payload.existing_words,
            config=load_config(),
        )
    except WordGenerationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    return {"words": words}

@router.get("/stats", response_model=StudyStats)
async def stats(conn = Depends(get_db)):
    return get_study_stats(conn)

@router.get("/next")
async def next_word(conn = Depends(get_db)):
    word_id = get_next_word(conn)
    if not word_id:
        return {"word": None}
    return {"word": repository.get_word(conn, word_id)}

@router.post("/words/{word_id}/check")
async def check_word(word_id: str, attempt: str = Body(..., embed=True), conn = Depends(get_db)):
    """Auto-rate an attempt; records the review only when a rating was decided."""
    word = repository.get_word(conn, word_id)
    if not word:
        raise HTTPException(status_code=404, detail="Word not found")
    rating = auto_rate(attempt, word["text"])
    srs = None
    if rating:
        repository.add_review(conn, word_id, rating)
        srs = update_srs(conn, word_id, rating)
    return {"word": word, "rating": rating, "auto_rated": rating is not None, "srs": srs}

@router.post("/words/{word_id}/rate", response_model=SRS)
async def rate_word(word_id: str, rating: Rating = Body(..., embed=True), conn = Depends(get_db)):
    if not repository.get_word(conn, word_id):
        raise HTTPException(status_code=404, detail="Word not found")
    repository.add_review(conn, word_id, rating.value)
    return update_srs(conn, word_id, rating.value)

@router.get("/export")
async def export_data(conn = Depends(get_db)):
    return repository.export_data(conn)

@router.post("/import")
async def import_data(payload: dict = Body(...), conn = Depends(get_db)):
    try:
        snapshot = parse_backup(payload)
    except BackupFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    repository.import_data(conn, snapshot)
    repository.ensure_srs_for_all_words(conn)
    return {"imported": len(snapshot["words"])}

@router.get("/settings", response_model=AppSettings)
async def read_settings():
    return get_settings()

@router.put("/settings", response_model=AppSettings)
async def write_settings(settings: AppSettings):
    return save_settings(settings.model_dump())
