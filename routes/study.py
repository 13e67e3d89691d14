from fastapi import APIRouter, Depends, Form, Request, HTTPException
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pathlib import Path
from typing import Optional, Dict
import logging

from config import get_settings
from db.database import get_db
from db import repository
from models.review import Rating
from models.study import StudyPhase
from utils.grading import auto_rate, feedback_message, letter_diff, normalize_attempt
from utils.letters import build_letter_pool, pool_columns
from utils.scheduler import get_next_word, get_study_stats, update_srs

router = APIRouter()
base_dir = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(base_dir / "templates"))
logger = logging.getLogger(__name__)
RATED_HEADERS = {"HX-Trigger": "study-rated"}

RATING_BUTTONS = [
    {"value": Rating.NAILED.value, "emoji": "🌟", "text": "Nailed it!", "color": "bg-green-500 hover:bg-green-600"},
    {"value": Rating.ALMOST.value, "emoji": "👍", "text": "Almost", "color": "bg-orange-500 hover:bg-orange-600"},
    {"value": Rating.STUMPED.value, "emoji": "🤔", "text": "Stumped", "color": "bg-red-500 hover:bg-red-600"},
]

def build_study_context(conn) -> Dict:
    """Everything the study page needs: next due word, its letter pool, stats and speech settings."""
    repository.ensure_srs_for_all_words(conn)
    has_words = bool(repository.get_all_words(conn))
    stats = get_study_stats(conn)
    word = None
    pool = []
    next_word_id = get_next_word(conn) if has_words else None
    if next_word_id:
        word = repository.get_word(conn, next_word_id)
    if word:
        pool = build_letter_pool(word["text"])
    return {
        "word": word,
        "pool": pool,
        "pool_columns": pool_columns(len(pool)),
        "stats": stats,
        "is_onboarding": not has_words,
        "phase": StudyPhase.LISTENING.value,
        "speech": get_settings(),
    }

def _get_word_or_404(conn, word_id: str) -> Dict:
    word = repository.get_word(conn, word_id)
    if not word:
        raise HTTPException(status_code=404, detail="Word not found")
    return word

def record_rating(conn, word: Dict, rating: str, attempt: str, auto_rated: bool) -> Dict:
    """Log the review, reschedule the word and build the feedback partial context."""
    repository.add_review(conn, word["id"], rating)
    srs = update_srs(conn, word["id"], rating)
    logger.info("Rated word %s as %s (auto=%s), next interval %sd", word["id"], rating, auto_rated, srs["interval"])
    return {
        "word": word,
        "rating": rating,
        "auto_rated": auto_rated,
        "attempt": attempt,
        "was_correct": normalize_attempt(attempt) == normalize_attempt(word["text"]),
        "feedback": feedback_message(rating, attempt, word["text"]),
        "diff": letter_diff(word["text"], attempt),
        "srs": srs,
        "stats": get_study_stats(conn),
        "phase": StudyPhase.RATING.value,
    }

@router.get("/next", response_class=HTMLResponse)
async def next_word(request: Request, conn = Depends(get_db)):
    """HTMX endpoint for the next word card (or the empty states)."""
    context = build_study_context(conn)
    if context["word"]:
        return templates.TemplateResponse(request, "partials/study_card.html", context)
    return templates.TemplateResponse(request, "partials/no_words.html", context)

@router.get("/stats", response_class=HTMLResponse)
async def stats_partial(request: Request, conn = Depends(get_db)):
    return templates.TemplateResponse(
        request, "partials/stats.html", {"stats": get_study_stats(conn)}
    )

@router.get("/{word_id}/hint", response_class=HTMLResponse)
async def show_hint(word_id: str, request: Request, conn = Depends(get_db)):
    word = _get_word_or_404(conn, word_id)
    return templates.TemplateResponse(
        request,
        "partials/hint.html",
        {"word": word, "phase": StudyPhase.HINT.value},
    )

@router.post("/check", response_class=HTMLResponse)
async def check_attempt(
    request: Request,
    word_id: str = Form(...),
    attempt: Optional[str] = Form(""),
    conn = Depends(get_db),
):
    """Reveal the answer; auto-rate exact matches and small typos, otherwise ask the learner."""
    word = _get_word_or_404(conn, word_id)
    attempt = attempt or ""
    rating = auto_rate(attempt, word["text"])
    if rating:
        context = record_rating(conn, word, rating, attempt, auto_rated=True)
        return templates.TemplateResponse(request, "partials/rating_result.html", context, headers=RATED_HEADERS)
    return templates.TemplateResponse(
        request,
        "partials/answer.html",
        {
            "word": word,
            "attempt": attempt,
            "was_correct": False,
            "diff": letter_diff(word["text"], attempt),
            "ratings": RATING_BUTTONS,
            "phase": StudyPhase.ANSWER.value,
        },
    )

@router.post("/rate", response_class=HTMLResponse)
async def rate_word(
    request: Request,
    word_id: str = Form(...),
    rating: Rating = Form(...),
    attempt: Optional[str] = Form(""),
    conn = Depends(get_db),
):
    """Manual self-rating after the answer was revealed."""
    word = _get_word_or_404(conn, word_id)
    context = record_rating(conn, word, rating.value, attempt or "", auto_rated=False)
    return templates.TemplateResponse(request, "partials/rating_result.html", context, headers=RATED_HEADERS)
