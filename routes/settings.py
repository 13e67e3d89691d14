from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pathlib import Path

from config import DEFAULT_SETTINGS, load_config, save_settings
from models.settings import AppSettings, SPEECH_MAX, SPEECH_MIN

router = APIRouter()
base_dir = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(base_dir / "templates"))

@router.get("", response_class=HTMLResponse)
async def settings_page(request: Request, saved: bool = False):
    config = load_config()
    return templates.TemplateResponse(
        request,
        "settings.html",
        {
            "settings": config["settings"],
            "speech": config["settings"],
            "model": config["openrouter"]["model"],
            "api_key_configured": bool(config["openrouter"]["api_key"]),
            "speech_min": SPEECH_MIN,
            "speech_max": SPEECH_MAX,
            "saved": saved,
        },
    )

@router.post("")
async def update_settings(
    prompt_template: str = Form(""),
    selected_voice: str = Form(""),
    speech_rate: float = Form(DEFAULT_SETTINGS["speech_rate"]),
    speech_pitch: float = Form(DEFAULT_SETTINGS["speech_pitch"]),
):
    settings = AppSettings(
        prompt_template=prompt_template,
        selected_voice=selected_voice,
        speech_rate=speech_rate,
        speech_pitch=speech_pitch,
    )
    save_settings(settings.model_dump())
    return RedirectResponse(url="/settings?saved=true", status_code=status.HTTP_303_SEE_OTHER)

@router.post("/reset")
async def reset_settings():
    save_settings(dict(DEFAULT_SETTINGS))
    return RedirectResponse(url="/settings?saved=true", status_code=status.HTTP_303_SEE_OTHER)
