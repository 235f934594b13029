import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.security import MIN_PASSWORD_LENGTH, get_password_hash
from app.db.database import SessionLocal, init_db
from app.api import ai_features, auth, documents, feedback, interactions, users
from app.models.user import User, UserRole

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


def bootstrap_admin() -> None:
    if not (settings.BOOTSTRAP_ADMIN_EMAIL and settings.BOOTSTRAP_ADMIN_PASSWORD):
        return
    if len(settings.BOOTSTRAP_ADMIN_PASSWORD) < MIN_PASSWORD_LENGTH:
        logger.warning(
            f"BOOTSTRAP_ADMIN_PASSWORD is shorter than {MIN_PASSWORD_LENGTH} characters, skipping admin bootstrap"
        )
        return
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == settings.BOOTSTRAP_ADMIN_EMAIL).first():
            return
        db.add(User(
            email=settings.BOOTSTRAP_ADMIN_EMAIL,
            name=settings.BOOTSTRAP_ADMIN_NAME,
            password_hash=get_password_hash(settings.BOOTSTRAP_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        ))
        db.commit()
        logger.info(f"Created bootstrap admin {settings.BOOTSTRAP_ADMIN_EMAIL}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
    bootstrap_admin()
    documents.document_processor.recover_interrupted()
    yield


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["users"])
app.include_router(documents.router, prefix=f"{settings.API_PREFIX}/documents", tags=["documents"])
app.include_router(interactions.router, prefix=f"{settings.API_PREFIX}/interactions", tags=["interactions"])
app.include_router(feedback.router, prefix=f"{settings.API_PREFIX}/feedback", tags=["feedback"])
app.include_router(ai_features.router, prefix=settings.API_PREFIX, tags=["ai"])


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy"}
