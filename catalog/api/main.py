"""
HTTP API for catalog records: artists and torrent-request comments.
"""

from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import List

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from util.logging import logger

from ..core.config import VERSION, PolicyConfig, debug_enabled, validate_config
from ..core.dao import ArtistStore, CommentStore, UserStore
from ..core.db import health_check, init_db
from ..core.errors import AuthenticationError, InsufficientPrivileges, NotFound, StoreUnavailable
from ..core.pipeline import MutationPipeline
from ..core.policy import OwnershipPolicy
from ..core.projection import project_creator, project_creators
from ..core.schema import Actor
from .deps import (
    get_actor,
    get_artist_store,
    get_clock,
    get_comment_store,
    get_policy,
    get_user_store
)
from .schemas import (
    ArtistResponse,
    ArtistWithCreatorResponse,
    ErrorResponse,
    HealthResponse,
    TorrentRequestCommentHierarchy,
    TorrentRequestCommentResponse,
    UserCreatedArtist,
    UserCreatedTorrentRequestComment,
    UserEditedArtist,
    UserEditedTorrentRequestComment
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Validate configuration
    issues = validate_config()
    if issues:
        raise ValueError(f"Catalog configuration invalid: {issues}")

    # Grace period is fixed for the lifetime of the process
    app.state.policy = OwnershipPolicy(PolicyConfig.from_env())
    logger.log_operation("startup", "success", {"grace_period_days": app.state.policy.grace_period.days})

    init_db()
    yield


# Initialize the FastAPI application
app = FastAPI(
    lifespan=lifespan,
    title="Catalog API",
    version=VERSION,
    description="Catalog records with time-windowed ownership edits",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump()
    )


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return _error(404, "not_found", str(exc))


@app.exception_handler(InsufficientPrivileges)
async def insufficient_privileges_handler(request: Request, exc: InsufficientPrivileges):
    return _error(403, "insufficient_privileges", str(exc))


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    return _error(503, "store_unavailable", "record store unavailable")


@app.exception_handler(AuthenticationError)
async def authentication_handler(request: Request, exc: AuthenticationError):
    logger.info(f"Rejected request to {request.url.path}: {exc}")
    response = _error(401, "unauthorized", "authentication required")
    response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint():
    """Check system health."""
    db_health = health_check()
    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=VERSION,
        db_health=db_health
    )


@app.post("/api/artists", response_model=List[ArtistResponse], status_code=201)
def create_artists(
    artists: List[UserCreatedArtist],
    actor: Actor = Depends(get_actor),
    store: ArtistStore = Depends(get_artist_store),
    clock=Depends(get_clock),
):
    now = clock.now()
    created = [
        store.create(
            name=a.name,
            description=a.description,
            pictures=a.pictures,
            created_by_id=actor.id,
            created_at=now
        )
        for a in artists
    ]
    logger.log_operation("artist.create", "success", {"actor_id": actor.id, "count": len(created)})
    return [ArtistResponse.model_validate(a) for a in created]


@app.get("/api/artists/{artist_id}", response_model=ArtistWithCreatorResponse)
def get_artist(
    artist_id: int,
    actor: Actor = Depends(get_actor),
    store: ArtistStore = Depends(get_artist_store),
    users: UserStore = Depends(get_user_store),
):
    artist = store.get(artist_id)
    if artist is None:
        raise NotFound(store.kind, artist_id)
    view = project_creator(artist, users)
    return ArtistWithCreatorResponse.model_validate({**asdict(view.record), "created_by": asdict(view.created_by)})


@app.put("/api/artists", response_model=ArtistResponse)
def edit_artist(
    form: UserEditedArtist,
    actor: Actor = Depends(get_actor),
    store: ArtistStore = Depends(get_artist_store),
    policy: OwnershipPolicy = Depends(get_policy),
    clock=Depends(get_clock),
):
    pipeline = MutationPipeline(store, policy, clock)
    artist = pipeline.edit(form.id, form.model_dump(exclude={"id"}), actor)
    return ArtistResponse.model_validate(artist)


@app.post("/api/torrent-requests/comments", response_model=TorrentRequestCommentResponse, status_code=201)
def create_comment(
    form: UserCreatedTorrentRequestComment,
    actor: Actor = Depends(get_actor),
    store: CommentStore = Depends(get_comment_store),
    clock=Depends(get_clock),
):
    comment = store.create(
        torrent_request_id=form.torrent_request_id,
        content=form.content,
        user_id=actor.id,
        created_at=clock.now()
    )
    logger.log_operation("torrent_request_comment.create", "success", {"actor_id": actor.id, "record_id": comment.id})
    return TorrentRequestCommentResponse.model_validate(comment)


@app.put("/api/torrent-requests/comments", response_model=TorrentRequestCommentResponse)
def edit_comment(
    form: UserEditedTorrentRequestComment,
    actor: Actor = Depends(get_actor),
    store: CommentStore = Depends(get_comment_store),
    policy: OwnershipPolicy = Depends(get_policy),
    clock=Depends(get_clock),
):
    pipeline = MutationPipeline(store, policy, clock)
    comment = pipeline.edit(form.id, form.model_dump(exclude={"id"}), actor)
    return TorrentRequestCommentResponse.model_validate(comment)


@app.get("/api/torrent-requests/{torrent_request_id}/comments", response_model=List[TorrentRequestCommentHierarchy])
def list_comments(
    torrent_request_id: int,
    actor: Actor = Depends(get_actor),
    store: CommentStore = Depends(get_comment_store),
    users: UserStore = Depends(get_user_store),
):
    views = project_creators(store.list_for_request(torrent_request_id), users)
    return [
        TorrentRequestCommentHierarchy.model_validate({**asdict(v.record), "created_by": asdict(v.created_by)})
        for v in views
    ]
