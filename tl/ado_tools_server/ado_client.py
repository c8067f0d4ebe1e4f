"""Azure DevOps REST API client.

One method per remote operation. Each method issues exactly one HTTP request,
raises ``RemoteApiError`` on a non-success status and maps the response to the
records in ``tl.ado_tools_server.models``.
"""

import base64
import logfire
import requests
from loguru import logger
from tl.ado_tools_server.config import ADOConfig
from tl.ado_tools_server.errors import RemoteApiError
from tl.ado_tools_server.models import Branch, Commit, PullRequest, Repository
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote


API_VERSION = '7.1'

# Caller-facing thread statuses mapped to the values the REST API expects.
THREAD_STATUSES: Dict[str, str] = {
    'active': 'active',
    'closed': 'closed',
    'fixed': 'fixed',
    'pending': 'pending',
    "won't fix": 'wontFix',
}


def to_ref_name(branch: str) -> str:
    """Return the fully qualified ref name for a branch."""
    return branch if branch.startswith('refs/') else f'refs/heads/{branch}'


def basic_auth_header(personal_access_token: str) -> str:
    """Build the Basic authorization value for a personal access token."""
    credentials = base64.b64encode(f':{personal_access_token}'.encode()).decode()
    return f'Basic {credentials}'


class AzureDevOpsClient:
    """Client for the project-scoped Azure DevOps REST API."""

    def __init__(self, config: ADOConfig, api_version: str = API_VERSION) -> None:
        """Initialize the client.

        Args:
            config: Process configuration holding organization, project and token
            api_version: REST API version sent with every request
        """
        self.organization = config.organization
        self.project = config.project
        self.api_version = api_version
        self.timeout = config.request_timeout
        self.base_url = (
            f'https://{config.host}/{quote(config.organization, safe="")}'
            f'/{quote(config.project, safe="")}/_apis'
        )
        self.headers = {
            'Authorization': basic_auth_header(config.personal_access_token),
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }

        logger.info(
            f'Initialized Azure DevOps client for {self.organization}/{self.project}'
        )
        logfire.info(
            'Azure DevOps client initialized',
            organization=self.organization,
            project=self.project,
            api_version=self.api_version,
        )

    def _url(self, path: str) -> str:
        return f'{self.base_url}{path}'

    def _params(self, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {'api-version': self.api_version}
        if extra:
            params.update(extra)
        return params

    def _check(self, response: requests.Response, method: str) -> None:
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            try:
                body: Any = response.json()
            except ValueError:
                body = response.text
            error = RemoteApiError(response.status_code, body, method=method, url=response.url)
            logger.error(str(error))
            logfire.error(
                'Azure DevOps API request failed',
                method=method,
                url=response.url,
                status_code=response.status_code,
            )
            raise error from e

    def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        response = requests.get(
            self._url(path), headers=self.headers, params=self._params(params), timeout=self.timeout
        )
        self._check(response, 'GET')
        return response.json()

    def _post(self, path: str, body: Dict[str, Any]) -> Any:
        response = requests.post(
            self._url(path),
            headers=self.headers,
            params=self._params(),
            json=body,
            timeout=self.timeout,
        )
        self._check(response, 'POST')
        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _repo_path(repository_id: str) -> str:
        return f'/git/repositories/{quote(repository_id, safe="")}'

    def create_repository(self, name: str) -> Repository:
        """Create a Git repository in the configured project.

        Args:
            name: Name of the repository to create

        Returns:
            The repository created by the service
        """
        data = self._post('/git/repositories', {'name': name})
        repository = Repository(data or {})

        logger.info(f'Created repository "{repository.name}" with ID {repository.id}')
        logfire.info(
            'Created Azure DevOps repository',
            repository_name=repository.name,
            repository_id=repository.id,
            organization=self.organization,
            project=self.project,
        )
        return repository

    def list_repositories(self) -> List[Repository]:
        """List the Git repositories of the configured project (first page only)."""
        data = self._get('/git/repositories')
        repositories = [Repository(item) for item in data.get('value', [])]

        logger.info(f'Retrieved {len(repositories)} repositories')
        logfire.info(
            'Listed Azure DevOps repositories',
            count=len(repositories),
            organization=self.organization,
            project=self.project,
        )
        return repositories

    def get_branches(self, repository_id: str) -> List[Branch]:
        """List the refs of a repository.

        Args:
            repository_id: ID or name of the repository

        Returns:
            Refs as returned by the service, in service order
        """
        data = self._get(f'{self._repo_path(repository_id)}/refs')
        branches = [Branch(item) for item in data.get('value', [])]

        logger.info(f'Retrieved {len(branches)} branches from repository {repository_id}')
        logfire.info(
            'Listed Azure DevOps branches',
            count=len(branches),
            repository_id=repository_id,
            organization=self.organization,
            project=self.project,
        )
        return branches

    def create_pull_request(
        self,
        repository_id: str,
        title: str,
        description: str,
        source_branch: str,
        target_branch: str,
    ) -> PullRequest:
        """Create a pull request.

        Args:
            repository_id: ID or name of the repository
            title: Title of the pull request
            description: Description of the pull request
            source_branch: Branch to merge from, short name or full ref
            target_branch: Branch to merge into, short name or full ref

        Returns:
            The pull request created by the service
        """
        request_body = {
            'title': title,
            'description': description,
            'sourceRefName': to_ref_name(source_branch),
            'targetRefName': to_ref_name(target_branch),
        }
        data = self._post(f'{self._repo_path(repository_id)}/pullrequests', request_body)
        pull_request = PullRequest(data or {})

        logger.info(
            f'Created pull request #{pull_request.pull_request_id} in repository {repository_id}'
        )
        logfire.info(
            'Created Azure DevOps pull request',
            repository_id=repository_id,
            pull_request_id=pull_request.pull_request_id,
            source_ref_name=request_body['sourceRefName'],
            target_ref_name=request_body['targetRefName'],
        )
        return pull_request

    def comment_on_pull_request(
        self,
        repository_id: str,
        pull_request_id: int,
        comment: str,
        status: str = 'active',
    ) -> None:
        """Start a comment thread on a pull request.

        Args:
            repository_id: ID or name of the repository
            pull_request_id: ID of the pull request
            comment: Comment text
            status: Thread status, one of the keys of ``THREAD_STATUSES``
        """
        if status not in THREAD_STATUSES:
            raise ValueError(
                f'Invalid thread status {status!r}; expected one of {", ".join(THREAD_STATUSES)}'
            )

        self._post(
            f'{self._repo_path(repository_id)}/pullrequests/{pull_request_id}/threads',
            {'comments': [{'content': comment}], 'status': THREAD_STATUSES[status]},
        )

        logger.info(f'Commented on pull request #{pull_request_id} in repository {repository_id}')
        logfire.info(
            'Commented on Azure DevOps pull request',
            repository_id=repository_id,
            pull_request_id=pull_request_id,
            status=status,
        )

    def get_commits(self, repository_id: str, branch: str) -> List[Commit]:
        """List commits of a repository filtered by branch (first page only).

        Args:
            repository_id: ID or name of the repository
            branch: Branch name used as the filter

        Returns:
            Commits as returned by the service
        """
        data = self._get(f'{self._repo_path(repository_id)}/commits', {'branch': branch})
        commits = [Commit(item) for item in data.get('value', [])]

        logger.info(f'Retrieved {len(commits)} commits from {repository_id}@{branch}')
        logfire.info(
            'Listed Azure DevOps commits',
            count=len(commits),
            repository_id=repository_id,
            branch=branch,
        )
        return commits

    def trigger_pipeline(self, pipeline_id: int, parameters: Mapping[str, Any]) -> None:
        """Queue a run of a pipeline.

        Args:
            pipeline_id: ID of the pipeline
            parameters: Pipeline parameters passed through unchanged
        """
        self._post(f'/pipelines/{pipeline_id}/runs', {'parameters': dict(parameters)})

        logger.info(f'Triggered pipeline {pipeline_id}')
        logfire.info(
            'Triggered Azure DevOps pipeline',
            pipeline_id=pipeline_id,
            parameter_names=sorted(parameters),
            organization=self.organization,
            project=self.project,
        )

    def list_pipelines(self) -> List[Dict[str, Any]]:
        """List the pipelines of the configured project (first page only)."""
        data = self._get('/pipelines')
        pipelines: List[Dict[str, Any]] = list(data.get('value', []))

        logger.info(f'Retrieved {len(pipelines)} pipelines')
        logfire.info(
            'Listed Azure DevOps pipelines',
            count=len(pipelines),
            organization=self.organization,
            project=self.project,
        )
        return pipelines
