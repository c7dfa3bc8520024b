from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session


def build_engine(db_url: str, echo: bool = False) -> Engine:
    """Create the engine for ``db_url``.

    SQLite is shared with FastAPI's worker threads, everything else
    (Postgres on Neon and friends) gets a pre-pinged pool.
    """
    if not db_url:
        db_url = "sqlite:///taskboard.db"

    # --- CONFIGURATION FOR SQLITE ---
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False}
        )

    # --- CONFIGURATION FOR POSTGRESQL ---
    # Heroku/Neon style URLs still say postgres://
    sync_url = db_url.replace("postgres://", "postgresql://")
    return create_engine(
        sync_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10
    )


def open_session(engine: Engine) -> Session:
    # Records stay readable after the session closes
    return Session(engine, expire_on_commit=False)
