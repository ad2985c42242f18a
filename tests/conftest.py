import pytest

from ghworld.analysis.stats.repo.repo import StatsRepository
from ghworld.data.cache.repo.repo import LocationCacheRepository, RepoLanguageCacheRepository
from ghworld.data.repo.repo import CommitRepository
from ghworld.storage.models.models import Commit
from ghworld.storage.unit_of_work import UnitOfWork

NOW = 1_760_000_000_000  # 2025-10-09T08:53:20Z
HOUR = 60 * 60 * 1000
DAY = 24 * HOUR


@pytest.fixture
def uow():
    uow = UnitOfWork("sqlite://")
    uow.create_all()
    yield uow
    uow.dispose()


def _with_uow(repo, uow):
    repo.uow = uow
    return repo


@pytest.fixture
def commit_repo(uow):
    return _with_uow(CommitRepository("sqlite://"), uow)


@pytest.fixture
def location_repo(uow):
    return _with_uow(LocationCacheRepository("sqlite://"), uow)


@pytest.fixture
def language_repo(uow):
    return _with_uow(RepoLanguageCacheRepository("sqlite://"), uow)


@pytest.fixture
def stats_repo(uow):
    return _with_uow(StatsRepository("sqlite://"), uow)


def make_commit_data(commit_id, timestamp=NOW, author="octocat", coordinates=None,
                     language="Python", repository="octocat/hello"):
    return {
        'id': commit_id,
        'author': author,
        'author_url': f"https://github.com/{author}",
        'message': f"commit {commit_id}",
        'repository': repository,
        'timestamp': timestamp,
        'coordinates': coordinates if coordinates is not None else [],
        'language': language,
    }


def make_commit(commit_id="c", timestamp=NOW, author="octocat", coordinates=None, language="Python"):
    coordinates = coordinates or []
    return Commit(
        id=commit_id,
        author=author,
        author_url=f"https://github.com/{author}",
        message="msg",
        repository="octocat/hello",
        timestamp=timestamp,
        latitude=coordinates[0] if coordinates else None,
        longitude=coordinates[1] if coordinates else None,
        language=language
    )
