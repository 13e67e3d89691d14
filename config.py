import tomllib
import shutil
import json
import re
from pathlib import Path
from typing import Any, Dict
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".bespelling"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_PROMPT_TEMPLATE = (
    "5th-grade level spelling words, mix of multisyllabic words, "
    "no proper nouns, focus on commonly misspelled words"
)
DEFAULT_SETTINGS = {
    "prompt_template": DEFAULT_PROMPT_TEMPLATE,
    "selected_voice": "",
    "speech_rate": 0.8,
    "speech_pitch": 1.0,
}

def load_config() -> Dict[str, Any]:
    """Load config from ~/.bespelling/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., OPENROUTER_API_KEY)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    openrouter_cfg = config.get("openrouter", {})
    config["openrouter"] = {
        "api_key": os.getenv("OPENROUTER_API_KEY", openrouter_cfg.get("api_key", "")),
        "model": os.getenv("OPENROUTER_DEFAULT_MODEL", openrouter_cfg.get("model", "google/gemini-2.5-flash")),
        "timeout": int(os.getenv("OPENROUTER_TIMEOUT", openrouter_cfg.get("timeout", 30))),
        "base_url": openrouter_cfg.get("base_url", "https://openrouter.ai/api/v1"),
    }
    settings_cfg = config.get("settings", {})
    config["settings"] = {key: settings_cfg.get(key, default) for key, default in DEFAULT_SETTINGS.items()}
    return config

def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    # JSON string escapes are valid TOML basic-string escapes
    return json.dumps(str(value), ensure_ascii=False)


def set_config_section(section: str, values: Dict[str, Any]) -> None:
    """Persist key/value pairs into a [section] table of config.toml, keeping other tables intact."""
    load_config()
    text = CONFIG_PATH.read_text(encoding="utf-8")
    header = f"[{section}]"
    if header not in text:
        lines = [header] + [f"{key} = {_toml_value(value)}" for key, value in values.items()]
        text = text.rstrip() + "\n\n" + "\n".join(lines) + "\n"
        CONFIG_PATH.write_text(text, encoding="utf-8")
        return

    def update_section(match: re.Match) -> str:
        body = match.group(1)
        rest = match.group(2)
        for key, value in values.items():
            line = f"{key} = {_toml_value(value)}"
            pattern = rf"^{re.escape(key)}\s*=.*$"
            if re.search(pattern, body, flags=re.MULTILINE):
                body = re.sub(pattern, lambda _: line, body, flags=re.MULTILINE)
            else:
                lines = body.rstrip().splitlines()
                lines.insert(1 if lines else 0, line)
                body = "\n".join(lines) + "\n"
        if rest and not body.endswith("\n\n"):
            body = body.rstrip("\n") + "\n\n"
        return body + rest

    text = re.sub(
        rf"(?ms)(^{re.escape(header)}.*?)(^\[|\Z)",
        update_section,
        text,
        count=1,
    )
    CONFIG_PATH.write_text(text, encoding="utf-8")


def get_settings() -> Dict[str, Any]:
    """Learner-facing settings (prompt template, voice, speech rate/pitch)."""
    return load_config()["settings"]


def save_settings(values: Dict[str, Any]) -> Dict[str, Any]:
    set_config_section("settings", values)
    return get_settings()
