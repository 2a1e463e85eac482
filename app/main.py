# app/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from core.config import settings
from core.errors import ErrorCode, error_detail
from core.logger import get_logger
from api.v1.auth import router as auth_router
from api.v1.users import router as users_router

log = get_logger("api")

app = FastAPI(title=settings.APP_NAME, version="2.0")


origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": error_detail(ErrorCode.INTERNAL_ERROR, "Internal server error")},
    )


@app.get("/health")
def health(): return {"ok": True}

app.include_router(auth_router)
app.include_router(users_router)
