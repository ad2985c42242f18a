import logging

import requests

from .exceptions import RateLimitError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUSES = (403, 429)


def _header_int(headers, name):
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class GitHubClient:
    def __init__(self, token=None, user_agent="ghworld-app", timeout=10):
        self.base_url = "https://api.github.com"
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": user_agent
        }
        self.timeout = timeout

        self.token = token
        if token:
            self.headers["Authorization"] = f"token {token}"

        self.session = requests.Session()
        self.session.headers.update(self.headers)

        # Last seen core budget, None until the first response carries it
        self.core_remaining = None

    def make_request(self, url, params=None):
        """Single bounded request; returns the response or None on transport failure"""
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request error for {url}: {e}")
            return None

        remaining = _header_int(response.headers, 'X-RateLimit-Remaining')
        if remaining is not None:
            self.core_remaining = remaining

        if response.status_code != 200:
            logger.debug(f"Error {response.status_code} for {url}")

        return response

    def get_public_events(self, per_page=100):
        """Latest page of public events plus the remaining rate budget.

        Raises RateLimitError on 403/429 and UpstreamUnavailableError on any
        other failure, so a poll cycle can abort without partial work.
        """
        url = f"{self.base_url}/events"
        response = self.make_request(url, params={"per_page": per_page})

        if response is None:
            raise UpstreamUnavailableError("GitHub events feed unreachable")

        if response.status_code in RATE_LIMIT_STATUSES:
            raise RateLimitError(
                f"GitHub events feed rate limited ({response.status_code})",
                status_code=response.status_code,
                remaining=_header_int(response.headers, 'X-RateLimit-Remaining'),
                reset_at=_header_int(response.headers, 'X-RateLimit-Reset')
            )

        if response.status_code != 200:
            raise UpstreamUnavailableError(
                f"GitHub events feed returned {response.status_code}",
                status_code=response.status_code
            )

        try:
            events = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"GitHub events feed returned invalid JSON: {e}")

        if not isinstance(events, list):
            raise UpstreamUnavailableError("GitHub events feed returned an unexpected payload")

        return events, self.core_remaining

    def get_user_info(self, username):
        """User profile; {} when the user is gone, None when it cannot be fetched"""
        url = f"{self.base_url}/users/{username}"
        response = self.make_request(url)
        if response is None:
            return None
        if response.status_code == 404:
            return {}
        if response.status_code != 200:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def get_user_location(self, username):
        """Profile location text; "" when the profile has none, None on failure"""
        user_info = self.get_user_info(username)
        if user_info is None:
            return None

        location = user_info.get('location')
        if not location:
            return ""
        return str(location).strip()

    def get_repository(self, full_name):
        """Repository metadata; {} when the repository is gone, None on failure"""
        url = f"{self.base_url}/repos/{full_name}"
        response = self.make_request(url)
        if response is None:
            return None
        if response.status_code == 404:
            return {}
        if response.status_code != 200:
            return None
        try:
            return response.json()
        except ValueError:
            return None
