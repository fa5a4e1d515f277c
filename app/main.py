# app/main.py
import logging

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.auth import router as auth_router
from app.api.v1.branches import router as branches_router
from app.api.v1.users import router as users_router
from app.core.config import settings
from app.core.exceptions import AppError, app_error_handler, global_exception_handler
from app.core.logging_config import setup_logging
from app.middleware.rate_limit import RateLimitMiddleware

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
)

# Middleware CORS d'abord
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

app.add_middleware(
    RateLimitMiddleware,
    request_limit=settings.RATE_LIMIT_REQUESTS,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
)

# Dernier ajouté = premier exécuté : l'id de corrélation couvre toute la requête
app.add_middleware(CorrelationIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(Exception, global_exception_handler)


@app.get("/")
def root():
    return {"message": f"Backend {settings.APP_NAME} actif"}


@app.get("/health")
def health_check():
    """Endpoint de santé pour les load balancers"""
    return {"status": "healthy"}


# Inclure les routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(branches_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
