from fastapi import APIRouter, Depends, Form, Request, HTTPException, status, UploadFile, File
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pathlib import Path
from typing import Optional
from urllib.parse import quote
import logging

from config import get_settings, load_config
from db.database import get_db
from db import repository
from utils.backup import BackupFormatError, backup_filename, dump_backup, parse_backup
from utils.hints import sanitize_hint
from utils.openrouter import WordGenerationError, generate_words, prompt_hash
from utils.scheduler import get_study_stats

router = APIRouter()
base_dir = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(base_dir / "templates"))
logger = logging.getLogger(__name__)

def _redirect(message: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    url = "/manage"
    if message:
        url += f"?message={quote(message)}"
    elif error:
        url += f"?error={quote(error)}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)

@router.get("", response_class=HTMLResponse)
async def manage_words(
    request: Request,
    message: Optional[str] = None,
    error: Optional[str] = None,
    conn = Depends(get_db),
):
    """List words with review counts and schedule."""
    repository.ensure_srs_for_all_words(conn)
    words = repository.list_words_with_stats(conn)
    return templates.TemplateResponse(
        request,
        "manage.html",
        {
            "words": words,
            "stats": get_study_stats(conn),
            "message": message,
            "error": error,
        },
    )

@router.post("/generate")
async def generate_new_words(conn = Depends(get_db)):
    """Generate a batch with the saved prompt template, avoiding words already stored."""
    settings = get_settings()
    prompt_template = settings["prompt_template"]
    existing = [word["text"] for word in repository.get_all_words(conn)]
    try:
        words = generate_words(prompt_template, existing_words=existing, config=load_config())
    except WordGenerationError as exc:
        logger.warning("Word generation failed: %s", exc.detail)
        return _redirect(error=f"Error generating words: {exc.detail}")
    repository.add_generated_words(conn, words, prompt_hash(prompt_template))
    return _redirect(message=f"Added {len(words)} new words")

@router.post("/words")
async def add_word(
    text: str = Form(..., description="Spelling word"),
    hint: str = Form(..., description="Spelling clue"),
    conn = Depends(get_db),
):
    """Add a single word by hand; it is due immediately."""
    text = (text or "").strip().lower()
    hint = (hint or "").strip()
    if not text or not hint:
        raise HTTPException(status_code=400, detail="Word and hint are required")
    word_id = repository.add_word(conn, text, sanitize_hint(text, hint))
    repository.initialize_srs(conn, word_id)
    return _redirect(message=f"Added '{text}'")

@router.post("/words/{word_id}/delete")
async def delete_word(word_id: str, request: Request, conn = Depends(get_db)):
    if not repository.delete_word(conn, word_id):
        raise HTTPException(status_code=404, detail="Word not found")
    if request.headers.get("HX-Request"):
        return HTMLResponse("")
    return _redirect()

@router.post("/clear")
async def clear_all_words(confirm: Optional[str] = Form(None), conn = Depends(get_db)):
    if confirm != "yes":
        raise HTTPException(status_code=400, detail="Confirmation required")
    repository.clear_all(conn)
    return _redirect(message="All words cleared")

@router.get("/export")
async def export_words(conn = Depends(get_db)):
    """Download every word, review and schedule as JSON."""
    body = dump_backup(repository.export_data(conn))
    headers = {"Content-Disposition": f"attachment; filename={backup_filename()}"}
    return Response(content=body, media_type="application/json", headers=headers)

@router.post("/import")
async def import_words(
    import_data: Optional[str] = Form(None, description="Pasted export JSON"),
    file: Optional[UploadFile] = File(None, description="Exported JSON file"),
    conn = Depends(get_db),
):
    """Replace all data with an exported snapshot (pasted or uploaded)."""
    raw = import_data or ""
    if file and file.filename:
        raw = await file.read()
    try:
        snapshot = parse_backup(raw)
    except BackupFormatError as exc:
        return _redirect(error=f"Error importing data: {exc}")
    repository.import_data(conn, snapshot)
    repository.ensure_srs_for_all_words(conn)
    return _redirect(message=f"Imported {len(snapshot['words'])} words")
