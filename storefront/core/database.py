"""
Database configuration and session management
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import os
import logging

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Lazy initialization for engine and session
_engine = None
_SessionLocal = None


def get_database_url() -> str:
    """Get database URL from environment"""
    url = os.environ.get("DATABASE_URL", "")

    if not url:
        # Try to import from settings as fallback
        try:
            from storefront.core.config import settings
            url = settings.DATABASE_URL
        except Exception as e:
            logger.warning(f"Could not load DATABASE_URL from settings: {e}")
            url = ""

    return url


def get_engine():
    """Get or create SQLAlchemy engine lazily"""
    global _engine

    if _engine is None:
        database_url = get_database_url()
        if not database_url:
            raise ValueError("DATABASE_URL is not configured")

        echo = os.environ.get("SQL_ECHO", "false").lower() == "true"
        logger.info("Creating database engine...")

        if database_url.startswith("sqlite"):
            # Local development / test database
            _engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                echo=echo,
            )
        else:
            try:
                _engine = create_engine(
                    database_url,
                    pool_pre_ping=True,
                    pool_size=5,
                    max_overflow=10,
                    pool_timeout=30,
                    pool_recycle=1800,  # Recycle connections after 30 min
                    echo=echo,
                )
            except Exception as e:
                logger.error(f"Failed to create database engine: {e}")
                raise
        logger.info("Database engine created successfully")

    return _engine


def get_session_local():
    """Get or create SessionLocal lazily"""
    global _SessionLocal

    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine()
        )

    return _SessionLocal


def reset_engine():
    """Dispose the engine so the next call re-reads DATABASE_URL"""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.
    Use this in FastAPI route dependencies.

    Example:
        @router.get("/products")
        def list_products(db: Session = Depends(get_db)):
            return db.query(Product).all()
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """Initialize database - creates tables if needed"""
    # Register all models on Base.metadata
    import storefront.models  # noqa: F401
    try:
        engine = get_engine()
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise
