import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from tether.config import Settings
from tether.database import init_db
from tether.auth.router import router as auth_router
from tether.profile.router import router as profile_router
from tether.social_graph.router import router as social_router
from tether.posts.router import router as posts_router

# Register every table with the shared metadata before create_all runs
from tether.auth import models as _auth_models  # noqa: F401
from tether.posts import models as _post_models  # noqa: F401
from tether.social_graph import models as _social_models  # noqa: F401

from tether_shared.auth.config import AuthSettings
from tether_shared.middleware.error_handler import error_envelope_middleware, register_error_handlers
from tether_shared.middleware.request_id import request_id_middleware

logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Tether Social Graph Service

* **Authentication**: email/password registration and login, JWT bearer tokens.
* **User profiles**: fetch any user, list all users (public summary), update or
  delete your own account.
* **Social graph**: follow/unfollow toggle, friends list, "who to follow"
  suggestions (up to 5).
* **Bookmarks**: toggle a bookmark on any post.

### Authentication
Protected endpoints require:
```
Authorization: Bearer <access_token>
```

### Response shape
```json
{ "success": true, "message": "...", "...payload": "..." }
{ "success": false, "error": "Human-readable message", "request_id": "..." }
```
"""

_TAGS_METADATA = [
    {"name": "auth", "description": "Registration and login."},
    {
        "name": "profile",
        "description": (
            "View users and manage your own account. Update and delete are "
            "restricted to the account owner."
        ),
    },
    {
        "name": "social-graph",
        "description": (
            "Directed follows (toggle), friends, suggestions, and post bookmarks (toggle)."
        ),
    },
    {"name": "posts", "description": "Minimal post creation and lookup."},
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

def get_settings() -> Settings:
    return Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    store = init_db(settings)
    if settings.auto_create_schema:
        await store.create_schema()
    app.state.store = store
    logger.info("Store opened (%s)", settings.env_name)
    try:
        yield
    finally:
        await store.close()
        app.state.store = None
        logger.info("Store closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Tether Social Graph Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.auth_settings = AuthSettings(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )

    register_error_handlers(app)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including errors) carry CORS headers.
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(profile_router, prefix=settings.api_prefix)
    app.include_router(social_router, prefix=settings.api_prefix)
    app.include_router(posts_router, prefix=settings.api_prefix)

    @app.get("/health", response_model=HealthResponse, tags=["health"], include_in_schema=True)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="tether")

    return app


app = create_app()
