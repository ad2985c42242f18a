from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class UnitOfWork:
    def __init__(self, database_url: str = None):
        if not database_url:
            raise ValueError("Database URL is required")

        self.database_url = database_url

        if database_url in IN_MEMORY_URLS:
            # one shared connection, otherwise every session sees an empty database
            self.engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                future=True
            )
        elif database_url.startswith("sqlite"):
            self.engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                future=True
            )
        else:
            self.engine = create_engine(
                database_url,
                pool_size=20,
                max_overflow=10,
                pool_pre_ping=True,
                pool_recycle=1800,
                future=True
            )
        self.session_factory = sessionmaker(
            bind=self.engine,
            expire_on_commit=False
        )

    @contextmanager
    def session_scope(self):
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self):
        return self.session_factory()

    def dispose(self):
        self.engine.dispose()

    def create_tables(self):
        from ghworld.storage.models.models import Base
        from ghworld.data.cache.models.models import Base as CacheBase
        Base.metadata.create_all(self.engine)
        CacheBase.metadata.create_all(self.engine)

    def create_stats_tables(self):
        from ghworld.analysis.stats.models.models import Base
        Base.metadata.create_all(self.engine)

    def create_all(self):
        self.create_tables()
        self.create_stats_tables()
