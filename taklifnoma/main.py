import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from taklifnoma.config import settings
from taklifnoma.database.supabase_client import SupabaseClient
from taklifnoma.modules.auth import routes as auth_routes
from taklifnoma.modules.profiles import routes as profiles_routes
from taklifnoma.modules.templates import routes as templates_routes
from taklifnoma.modules.invitations import routes as invitations_routes
from taklifnoma.modules.guests import routes as guests_routes
from taklifnoma.modules.rsvps import routes as rsvps_routes
from taklifnoma.modules.database_setup import routes as database_setup_routes
from taklifnoma.modules.database_setup.service import DatabaseSetupService

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(profiles_routes.router, prefix="/api/v1")
app.include_router(templates_routes.router, prefix="/api/v1")
app.include_router(invitations_routes.router, prefix="/api/v1")
app.include_router(guests_routes.router, prefix="/api/v1")
app.include_router(rsvps_routes.router, prefix="/api/v1")
app.include_router(database_setup_routes.router, prefix="/api/v1")
app.include_router(invitations_routes.public_router)


def provision_database_if_needed() -> None:
    """First-run provisioning: set up the schema when any required table is missing."""
    try:
        service = DatabaseSetupService(SupabaseClient.get_service_client())
        status = service.check_database_status()
        if status.all_tables_exist:
            logger.info("Database schema present")
            return
        missing = [table for table, ok in status.status.items() if not ok]
        logger.info(f"Missing tables {missing}, running database setup")
        result = service.setup_database()
        if not result.success:
            logger.error(f"Database setup failed at {result.failed_step}: {result.message}")
    except Exception as e:
        logger.error(f"Database provisioning skipped: {e}")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    if settings.auto_setup_database:
        provision_database_if_needed()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to taklifnoma-backend", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    return {"status": "ready"}
