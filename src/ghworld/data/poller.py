import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ghworld.data.enrichment import LanguageResolver, LocationResolver
from ghworld.data.github.exceptions import RateLimitError, UpstreamUnavailableError
from ghworld.data.github.github_client import GitHubClient
from ghworld.data.repo.repo import CommitRepository
from ghworld.utils.utils import to_epoch_ms

logger = logging.getLogger(__name__)

PUSH_EVENT = "PushEvent"
DEFAULT_MESSAGE = "No commit message"
MESSAGE_LENGTH = 200


@dataclass
class PollResult:
    stored_count: int = 0
    processed_count: int = 0
    rate_limited: bool = False
    error: Optional[str] = None

    def to_dict(self):
        result = {
            'storedCount': self.stored_count,
            'processedCount': self.processed_count,
            'rateLimited': self.rate_limited,
        }
        if self.error:
            result['error'] = self.error
        return result


def extract_push_event(event: dict) -> Optional[dict]:
    """Actor, repository, head commit id, message and timestamp of a push event"""
    if not isinstance(event, dict) or event.get('type') != PUSH_EVENT:
        return None

    try:
        actor = (event.get('actor') or {}).get('login')
        repository = (event.get('repo') or {}).get('name')
        payload = event.get('payload') or {}
        head = payload.get('head')
        timestamp = to_epoch_ms(event.get('created_at'))

        if not actor or not repository or not head or timestamp is None:
            return None

        message = None
        for commit in payload.get('commits') or []:
            if commit.get('sha', commit.get('id')) == head:
                message = commit.get('message')
                break

        return {
            'id': head,
            'author': actor,
            'author_url': f"https://github.com/{actor}",
            'repository': repository,
            'message': str(message)[:MESSAGE_LENGTH] if message else DEFAULT_MESSAGE,
            'timestamp': timestamp,
        }
    except (AttributeError, TypeError) as e:
        logger.warning(f"Malformed push event {event.get('id')}: {e}")
        return None


class EventPoller:
    def __init__(self, client: GitHubClient, commit_repo: CommitRepository,
                 location_resolver: LocationResolver, language_resolver: LanguageResolver,
                 per_page: int = 100, enrichment_floor: int = 500):
        self.client = client
        self.commit_repo = commit_repo
        self.location_resolver = location_resolver
        self.language_resolver = language_resolver
        self.per_page = per_page
        self.enrichment_floor = enrichment_floor
        self._listeners: List[Callable[[List[dict]], None]] = []

    def subscribe(self, callback: Callable[[List[dict]], None]):
        """callback(new_commits) runs after every cycle that stored something"""
        self._listeners.append(callback)

    def should_enrich(self, remaining: Optional[int]) -> bool:
        if remaining is None:
            return True
        return remaining > self.enrichment_floor

    def poll(self) -> PollResult:
        try:
            events, remaining = self.client.get_public_events(per_page=self.per_page)
        except RateLimitError as e:
            logger.warning(f"Poll skipped: {e.message} (reset at {e.reset_at})")
            return PollResult(rate_limited=True)
        except UpstreamUnavailableError as e:
            logger.error(f"Poll failed: {e.message}")
            return PollResult(error=e.message)

        enrich = self.should_enrich(remaining)
        if not enrich:
            logger.info(f"Rate budget low ({remaining}), skipping language enrichment this cycle")

        commits = []
        coordinates_memo: Dict[str, list] = {}
        language_memo: Dict[str, Optional[str]] = {}

        for event in events:
            commit = extract_push_event(event)
            if not commit:
                continue

            commit['coordinates'] = self._coordinates_for(commit['author'], coordinates_memo)
            commit['language'] = self._language_for(commit['repository'], language_memo) if enrich else None
            commits.append(commit)

        stored_ids = self.commit_repo.insert_many(commits) if commits else []
        by_id = {commit['id']: commit for commit in commits}
        stored = [by_id[commit_id] for commit_id in stored_ids]

        logger.info(f"Poll: stored {len(stored)} of {len(commits)} push commits from {len(events)} events")

        if stored:
            self._notify(stored)

        return PollResult(stored_count=len(stored), processed_count=len(events))

    def _coordinates_for(self, username, memo):
        if username not in memo:
            try:
                memo[username] = self.location_resolver.resolve(username)
            except Exception as e:
                logger.warning(f"Location lookup failed for {username}: {e}")
                memo[username] = []
        return memo[username]

    def _language_for(self, repository, memo):
        if repository not in memo:
            try:
                memo[repository] = self.language_resolver.resolve(repository)
            except Exception as e:
                logger.warning(f"Language lookup failed for {repository}: {e}")
                memo[repository] = None
        return memo[repository]

    def _notify(self, stored):
        for callback in self._listeners:
            try:
                callback(stored)
            except Exception as e:
                logger.exception(f"Commit listener failed: {e}")
