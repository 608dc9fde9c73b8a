import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prode import settings
from prode.routes import qualification, scoring, standings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(standings.router, prefix="/api", tags=["standings"])
app.include_router(qualification.router, prefix="/api", tags=["playoffs"])
app.include_router(scoring.router, prefix="/api", tags=["scoring"])


@app.on_event("startup")
def on_startup():
    route_count = 0
    for r in app.routes:
        path = getattr(r, "path", None)
        if path:
            methods = getattr(r, "methods", None)
            methods_str = ", ".join(sorted(methods)) if methods else "N/A"
            logger.info("%-20s %s", methods_str, path)
            route_count += 1
    logger.info("Total routes: %d", route_count)


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint"""
    return {"app_name": settings.APP_NAME, "status": "healthy"}
