# reporter/services/github_client.py
"""GitHub client for filing bug reports as issues."""

import logging

from github import Auth, Github, GithubException

from reporter.exceptions import InvalidRepositoryError, IssueCreationError
from reporter.models.bug_report import BugAnalysis, Issue
from reporter.models.conversation import UserContext

logger = logging.getLogger(__name__)

ISSUE_LABELS = ["bug", "from-crisp"]


def parse_repository(repo: str) -> tuple[str, str]:
    """
    Split "owner/name" into its two parts.

    Raises:
        InvalidRepositoryError: Unless repo has exactly two non-empty segments
    """
    parts = repo.split("/") if isinstance(repo, str) else []
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise InvalidRepositoryError("Repository must be in format owner/repo")
    owner, name = (part.strip() for part in parts)
    return owner, name


def _upstream_message(error: GithubException) -> str:
    data = error.data
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(data) if data else str(error)


class GitHubClient:
    """GitHub client for issue creation."""

    def __init__(
        self, token: str, timeout: int = 30, base_url: str = "https://api.github.com"
    ) -> None:
        """
        Initialize GitHub client with a Personal Access Token.

        Each request is sent once: PyGithub's automatic retries are disabled.

        Args:
            token: Personal Access Token for authentication
            timeout: Seconds to wait for GitHub before giving up
            base_url: GitHub API root

        Raises:
            ValueError: If no token is provided
        """
        if not token:
            raise ValueError("A GitHub token must be provided")
        self._github = Github(
            auth=Auth.Token(token),
            base_url=base_url,
            timeout=timeout,
            retry=None,
            lazy=True,
        )

    def create_issue(
        self, owner: str, name: str, title: str, body: str, labels: list[str]
    ) -> tuple[str, int]:
        """
        Create an issue in owner/name.

        Returns:
            Tuple of (issue_url, issue_number)

        Raises:
            IssueCreationError: If GitHub rejects the request
        """
        try:
            repo = self._github.get_repo(f"{owner}/{name}")
            issue = repo.create_issue(title=title, body=body, labels=labels)
        except GithubException as e:
            message = _upstream_message(e)
            logger.error(f"GitHub rejected issue for {owner}/{name}: {e.status} {message}")
            raise IssueCreationError(
                f"GitHub API error ({e.status}): {message}", upstream_status=e.status
            ) from e
        except Exception as e:
            raise IssueCreationError(f"GitHub request failed: {e}") from e

        logger.info(f"Created issue #{issue.number}: {issue.html_url}")
        return issue.html_url, issue.number

    def file_issue(
        self,
        analysis: BugAnalysis,
        context: UserContext,
        conversation_url: str,
        repo: str,
    ) -> Issue:
        """
        Render a bug analysis as an issue and create it.

        Args:
            analysis: Validated bug analysis
            context: User context shown in the issue table
            conversation_url: Link back to the Crisp conversation
            repo: Target repository in "owner/repo" format

        Returns:
            The created Issue

        Raises:
            InvalidRepositoryError: If repo is malformed (checked before any request)
            IssueCreationError: If GitHub rejects the issue
        """
        owner, name = parse_repository(repo)
        body = analysis.to_github_body(context, conversation_url)
        url, number = self.create_issue(owner, name, analysis.title, body, list(ISSUE_LABELS))
        return Issue(number=number, url=url, title=analysis.title)
