import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request, Depends
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db, get_db
from config import load_config, CONFIG_DIR
from routes import study, manage, settings, api  # Import routers
from routes.study import build_study_context

logger = logging.getLogger(__name__)

# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: init DB and config
    load_config()  # Ensures config exists
    init_db()
    yield

templates = Jinja2Templates(directory=str(base_dir / "templates"))
app = FastAPI(
    title="Be-Spelling",
    description="Local-first spelling practice for kids",
    lifespan=lifespan,
)

app.mount("/static", StaticFiles(directory=str(base_dir / "static")), name="static")

# Include routers
app.include_router(study.router, prefix="/study", tags=["study"])
app.include_router(manage.router, prefix="/manage", tags=["manage"])
app.include_router(settings.router, prefix="/settings", tags=["settings"])
app.include_router(api.router, prefix="/api", tags=["api"])

# Home page - the study loop
@app.get("/", response_class=HTMLResponse)
async def home(request: Request, conn = Depends(get_db)):
    context = build_study_context(conn)
    return templates.TemplateResponse(request, "study.html", context)

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Be-Spelling App")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument("--log-level", default="info", help="Log level for the app and uvicorn")
    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.init:
        load_config()  # Ensures config is copied if missing
        init_db()
        logger.info("DB initialized and config copied to %s", CONFIG_DIR)
        sys.exit(0)
    # Run server
    uvicorn.run("main:app", host="127.0.0.1", port=args.port, reload=args.dev, log_level=args.log_level)
