from sqlalchemy import BigInteger, Column, Float, Integer, JSON, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MonthlyStats(Base):
    __tablename__ = 'monthly_stats'

    id = Column(Integer, primary_key=True, autoincrement=True)
    month = Column(String(7), nullable=False, unique=True, index=True)  # YYYY-MM
    total_commits = Column(Integer, nullable=False, default=0)
    unique_contributors = Column(Integer, nullable=False, default=0)
    by_language = Column(JSON, nullable=False, default=dict)
    geolocation_rate = Column(Float, nullable=False, default=0.0)
    updated_at = Column(BigInteger, nullable=False)

    def to_dict(self):
        return {
            'month': self.month,
            'totalCommits': self.total_commits,
            'uniqueContributors': self.unique_contributors,
            'byLanguage': dict(self.by_language or {}),
            'geolocationRate': self.geolocation_rate,
            'updatedAt': self.updated_at,
        }


class DailyStats(Base):
    __tablename__ = 'daily_stats'

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), nullable=False, unique=True, index=True)  # YYYY-MM-DD
    total_commits = Column(Integer, nullable=False, default=0)
    unique_contributors = Column(Integer, nullable=False, default=0)
    by_language = Column(JSON, nullable=False, default=dict)
    updated_at = Column(BigInteger, nullable=False)

    def to_dict(self):
        return {
            'date': self.date,
            'totalCommits': self.total_commits,
            'uniqueContributors': self.unique_contributors,
            'byLanguage': dict(self.by_language or {}),
            'updatedAt': self.updated_at,
        }
