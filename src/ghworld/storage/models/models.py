from sqlalchemy import BigInteger, CheckConstraint, Column, Float, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Commit(Base):
    __tablename__ = 'commits'
    __table_args__ = (
        CheckConstraint(
            '(latitude IS NULL AND longitude IS NULL) OR (latitude IS NOT NULL AND longitude IS NOT NULL)',
            name='ck_commits_coordinates_pair'
        ),
    )

    id = Column(String(100), primary_key=True)
    author = Column(String(255), nullable=False, index=True)
    author_url = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    repository = Column(String(255), nullable=False)
    timestamp = Column(BigInteger, nullable=False, index=True)  # epoch millis
    latitude = Column(Float)
    longitude = Column(Float)
    language = Column(String(100))

    @property
    def coordinates(self):
        if self.latitude is None or self.longitude is None:
            return []
        return [self.latitude, self.longitude]

    @property
    def is_located(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self):
        return {
            'id': self.id,
            'author': self.author,
            'authorUrl': self.author_url,
            'message': self.message,
            'repository': self.repository,
            'timestamp': self.timestamp,
            'coordinates': self.coordinates,
            'language': self.language,
        }

    def __repr__(self):
        return f"<Commit(id={self.id}, author={self.author}, timestamp={self.timestamp})>"
