import os
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2://postgres:postgres@db:5432/campus_swipe")

if DATABASE_URL.startswith("sqlite"):
    # In-memory SQLite must share one connection across the TestClient threads.
    _pool_kwargs = {"poolclass": StaticPool} if ":memory:" in DATABASE_URL else {}
    engine = create_engine(DATABASE_URL, future=True, connect_args={"check_same_thread": False}, **_pool_kwargs)
else:
    engine = create_engine(DATABASE_URL, future=True, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()
