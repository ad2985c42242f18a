"""Exceptions raised by the GitHub client."""


class GitHubError(Exception):
    """Error talking to the GitHub API."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(GitHubError):
    """The request was refused because the rate budget is spent (403/429)."""

    def __init__(self, message: str, status_code: int | None = None,
                 remaining: int | None = None, reset_at: int | None = None):
        self.remaining = remaining
        self.reset_at = reset_at  # Unix timestamp when the budget resets
        super().__init__(message, status_code)


class UpstreamUnavailableError(GitHubError):
    """Non-success status, transport failure or timeout."""
