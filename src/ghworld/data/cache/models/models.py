from sqlalchemy import BigInteger, Column, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class LocationCacheEntry(Base):
    __tablename__ = 'location_cache'

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    location = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    cached_at = Column(BigInteger, nullable=False)

    @property
    def coordinates(self):
        return [self.latitude, self.longitude]

    def __repr__(self):
        return f"<LocationCacheEntry(username={self.username}, location={self.location})>"


class RepoLanguageCacheEntry(Base):
    __tablename__ = 'repo_language_cache'

    id = Column(Integer, primary_key=True, autoincrement=True)
    repository = Column(String(255), nullable=False, unique=True, index=True)
    language = Column(String(100))
    cached_at = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<RepoLanguageCacheEntry(repository={self.repository}, language={self.language})>"
