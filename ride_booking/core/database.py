"""
Database configuration and session management.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from typing import Optional

from ride_booking.core.config import settings

def build_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create an async engine for the snapshot database."""
    return create_async_engine(
        database_url or settings.DATABASE_URL,
        echo=settings.DEBUG,
        future=True
    )

def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

# Create async engine
engine = build_engine()

# Create async session factory
AsyncSessionLocal = build_session_factory(engine)

# Create base class for models
Base = declarative_base()
