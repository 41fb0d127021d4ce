import traceback

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError

from career_coach.core.config import get_settings
from career_coach.core.errors import CoachError
from career_coach.core.logging import get_logger, setup_logging
from career_coach.routers import health, auth, candidates, recruiters, roadmaps

settings = get_settings()

setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Career Coach Backend",
    description="APIs for candidate roadmaps, progress scoring, and recruiter compatibility checks.",
    version="0.1.0",
    openapi_tags=[
        {"name": "health", "description": "Service health"},
        {"name": "auth", "description": "Caller identity"},
        {"name": "candidates", "description": "Candidate resume and targets"},
        {"name": "recruiters", "description": "Recruiter job requirements"},
        {"name": "roadmaps", "description": "Roadmap generation, milestones, and scoring"},
    ],
)

# Install CORS middleware early so that OPTIONS preflight is handled
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,  # keep True to allow cookies/Authorization headers if needed
    allow_methods=["*"],     # include OPTIONS automatically
    allow_headers=["*"],     # include requested custom headers
)


# Domain errors carry their own status and code; traces only outside production
@app.exception_handler(CoachError)
async def coach_error_handler(request: Request, exc: CoachError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    content = {"detail": exc.message, "code": exc.code}
    if exc.details:
        content["details"] = exc.details
    if not get_settings().is_production:
        content["trace"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=exc.status_code, content=content)

# Ensure standard HTTP exceptions pass through (do not override FastAPI/Starlette defaults)
@app.exception_handler(StarletteHTTPException)
async def http_exception_passthrough(request: Request, exc: StarletteHTTPException):
    # Let FastAPI build the normal response (status + detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

# Do not treat validation errors from OPTIONS as 500s; keep default 422 for non-OPTIONS requests
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # If it's a CORS preflight (OPTIONS), respond with empty OK to avoid 400/422 from body validation
    if request.method.upper() == "OPTIONS":
        # Let CORSMiddleware handle headers; return 204 No Content
        return JSONResponse(status_code=204, content=None)
    return JSONResponse(status_code=422, content={"detail": exc.errors()})

# Catch-all for truly unhandled exceptions only
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# Routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(candidates.router)
app.include_router(recruiters.router)
app.include_router(roadmaps.router)
