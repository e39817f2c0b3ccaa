"""GitHub notifications, open pull requests and recent pushed commits.

The token is an opaque credential from config or ``GITHUB_TOKEN``; no auth
flow is handled here.
"""

from __future__ import annotations

import httpx

from feedtui.feeds import (
    FeedFetchError,
    GithubCommit,
    GithubData,
    GithubNotification,
    GithubPullRequest,
    HttpFetcher,
)

GITHUB_API_BASE = "https://api.github.com"
GITHUB_WEB_BASE = "https://github.com"


def api_to_web_url(api_url: str | None, repository: str) -> str:
    """Map an api.github.com subject URL to its github.com page."""
    if not api_url:
        return f"{GITHUB_WEB_BASE}/{repository}"
    url = api_url.replace(f"{GITHUB_API_BASE}/repos/", f"{GITHUB_WEB_BASE}/")
    return url.replace("/pulls/", "/pull/").replace("/commits/", "/commit/")


def parse_notifications(data: list[dict]) -> list[GithubNotification]:
    notifications = []
    for n in data:
        repository = n["repository"]["full_name"]
        subject = n.get("subject", {})
        notifications.append(
            GithubNotification(
                id=str(n["id"]),
                title=subject.get("title", ""),
                notification_type=subject.get("type", ""),
                repository=repository,
                url=api_to_web_url(subject.get("url"), repository),
                unread=bool(n.get("unread", False)),
                updated_at=n.get("updated_at", ""),
                reason=n.get("reason", ""),
            )
        )
    return notifications


def parse_pull_requests(data: dict) -> list[GithubPullRequest]:
    prs = []
    for item in data.get("items", []):
        repository = item.get("repository_url", "").removeprefix(f"{GITHUB_API_BASE}/repos/")
        prs.append(
            GithubPullRequest(
                id=item["id"],
                number=item["number"],
                title=item.get("title", ""),
                repository=repository,
                state=item.get("state", "open"),
                author=(item.get("user") or {}).get("login", ""),
                created_at=item.get("created_at", ""),
                updated_at=item.get("updated_at", ""),
                draft=bool(item.get("draft", False)),
                comments=item.get("comments", 0),
                url=item.get("html_url", ""),
            )
        )
    return prs


def parse_push_events(data: list[dict], limit: int) -> list[GithubCommit]:
    commits = []
    for event in data:
        if event.get("type") != "PushEvent":
            continue
        repository = event["repo"]["name"]
        payload = event.get("payload", {})
        branch = payload.get("ref", "").removeprefix("refs/heads/")
        for c in payload.get("commits") or []:
            commits.append(
                GithubCommit(
                    sha=c["sha"][:7],
                    message=c.get("message", "").splitlines()[0] if c.get("message") else "",
                    author=(c.get("author") or {}).get("name", ""),
                    repository=repository,
                    branch=branch,
                    timestamp=event.get("created_at", ""),
                    url=f"{GITHUB_WEB_BASE}/{repository}/commit/{c['sha']}",
                )
            )
            if len(commits) >= limit:
                return commits
    return commits


class GithubFetcher(HttpFetcher):
    def __init__(
        self,
        token: str,
        username: str,
        show_notifications: bool = True,
        show_pull_requests: bool = True,
        show_commits: bool = True,
        max_notifications: int = 20,
        max_pull_requests: int = 20,
        max_commits: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(transport)
        self._token = token
        self._username = username
        self._show_notifications = show_notifications
        self._show_pull_requests = show_pull_requests
        self._show_commits = show_commits
        self._max_notifications = max_notifications
        self._max_pull_requests = max_pull_requests
        self._max_commits = max_commits

    async def _get(self, client: httpx.AsyncClient, path: str, **params):
        resp = await client.get(f"{GITHUB_API_BASE}{path}", params=params or None)
        resp.raise_for_status()
        return resp.json()

    async def fetch(self) -> GithubData:
        if not self._token:
            raise FeedFetchError("GitHub token not configured")

        headers = {
            "Authorization": f"token {self._token}",
            "Accept": "application/vnd.github+json",
        }
        notifications: list[GithubNotification] = []
        pull_requests: list[GithubPullRequest] = []
        commits: list[GithubCommit] = []

        async with self._client(headers) as client:
            if self._show_notifications:
                data = await self._get(
                    client, "/notifications", per_page=self._max_notifications
                )
                notifications = parse_notifications(data)[: self._max_notifications]

            if self._show_pull_requests and self._username:
                data = await self._get(
                    client,
                    "/search/issues",
                    q=f"involves:{self._username} type:pr state:open",
                    sort="updated",
                    per_page=self._max_pull_requests,
                )
                pull_requests = parse_pull_requests(data)[: self._max_pull_requests]

            if self._show_commits and self._username:
                data = await self._get(
                    client, f"/users/{self._username}/events", per_page=100
                )
                commits = parse_push_events(data, self._max_commits)

        return GithubData(tuple(notifications), tuple(pull_requests), tuple(commits))
