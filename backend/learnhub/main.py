"""
FastAPI application entrypoint.
Run with: uvicorn learnhub.main:app --reload --port 8000 (from backend/)

API base path: routes are mounted at root (no /api/v1 prefix).
  - Topics: GET /topics, GET /topics/bowl-challenge, POST /topics, PUT /topics/{id}, POST /topics/reorder
  - Content: GET /content?topic_id=, POST /content, PUT /content/{id}, POST /content/reorder
  - Collections: GET /collections, GET /collections/route/{route}, GET /collections/{id}/content, ...
  - Filter rules: GET /cms-filter-config, GET /cms-filter-config/level/{level}, PATCH /cms-filter-config/{id}/toggle
  - Hierarchy: GET /hierarchy?level=&parent=&collection_id=, GET /hierarchy/parents?level=
  - Subjects: GET /subjects/groups
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from learnhub import metrics
from learnhub.config import settings
from learnhub.api.collections import router as collections_router
from learnhub.api.content import router as content_router
from learnhub.api.filter_rules import router as filter_rules_router
from learnhub.api.hierarchy import router as hierarchy_router
from learnhub.api.subjects import router as subjects_router
from learnhub.api.topics import router as topics_router

app = FastAPI(
    title="LearnHub Content API",
    description="Topics, content and collections, resolved into browsable hierarchies.",
    version="0.1.0",
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins if _origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(topics_router)
app.include_router(content_router)
app.include_router(collections_router)
app.include_router(filter_rules_router)
app.include_router(hierarchy_router)
app.include_router(subjects_router)


@app.on_event("startup")
def startup():
    """Configure logging and create/seed the SQLite tables."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    _log = logging.getLogger("learnhub.main")
    from learnhub.database import init_sqlite_db
    init_sqlite_db()
    _log.info("Database ready (env=%s, subjects=%s)", settings.env, len(settings.challenge_subject_list))


@app.get("/", response_class=HTMLResponse)
def root():
    """Minimal landing page linking to the API docs."""
    return """
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"><title>LearnHub Content API</title></head>
    <body style="font-family: system-ui; max-width: 600px; margin: 2rem auto; padding: 1rem;">
    <h1>LearnHub Content API</h1>
    <p>This is the <strong>API server</strong>. It returns JSON.</p>
    <ul>
    <li><a href="/docs">OpenAPI docs (Swagger)</a></li>
    <li><a href="/redoc">ReDoc</a></li>
    <li>Health: <a href="/health">/health</a></li>
    <li>Hierarchy: <a href="/hierarchy?level=1">/hierarchy?level=1</a></li>
    </ul>
    </body>
    </html>
    """


@app.get("/health")
def health():
    """Health check (JSON) with resolver counters."""
    return {"status": "ok", "message": "LearnHub Content API", "metrics": metrics.snapshot()}
