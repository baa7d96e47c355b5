# xpense/main.py
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from xpense.core.config import settings
from xpense.core.errors import XpenseError
from xpense.database import Base, engine
from xpense.models import book, challenge, community, daily_saving, quiz, transaction, user  # noqa: F401
from xpense.routers import books, challenges, daily_saving as daily_saving_routes, quiz as quiz_routes
from xpense.routers import community as community_routes, tokens, user_routes

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("xpense")

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=settings.ALLOW_METHODS,
    allow_headers=settings.ALLOW_HEADERS,
)


@app.exception_handler(XpenseError)
def handle_xpense_error(request: Request, exc: XpenseError):
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind, "code": exc.code},
    )


@app.get("/")
def read_root():
    return {"message": "Xpense backend running"}


# Routers
app.include_router(user_routes.router)
app.include_router(tokens.router)
app.include_router(challenges.router)
app.include_router(daily_saving_routes.router)
app.include_router(quiz_routes.router)
app.include_router(community_routes.router)
app.include_router(books.router)

# Create DB tables
Base.metadata.create_all(bind=engine)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Paste your access_token into the Authorize button to test secured routes.",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    }
    for path in openapi_schema["paths"].values():
        for method in path.values():
            method["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
