"""Azure DevOps tools exposed over MCP.

Each tool pairs a parameter model with an async execute function. Execute
functions receive already validated parameters, call exactly one client method
in a worker thread and format the result as a string.
"""

import asyncio
import json
from dataclasses import dataclass
from pydantic import Field
from tl.ado_tools_server.ado_client import AzureDevOpsClient
from tl.ado_tools_server.schema import ParameterSchema, ToolParameters
from typing import Any, Awaitable, Callable, Dict, Iterable, Iterator, List, Literal, Optional


ThreadStatus = Literal['active', 'closed', 'fixed', 'pending', "won't fix"]


# At least one non-whitespace character.
NON_BLANK = r'\S'


class NoParameters(ToolParameters):
    """Tools that take no arguments."""


class CreateRepoParameters(ToolParameters):
    """Arguments of ``create-repo``."""

    name: str = Field(
        min_length=1, pattern=NON_BLANK, description='Name of the repository to create'
    )


class GetBranchesParameters(ToolParameters):
    """Arguments of ``get-branches``."""

    repository_id: str = Field(min_length=1, pattern=NON_BLANK, description='ID of the repository')


class CreatePullRequestParameters(ToolParameters):
    """Arguments of ``create-pull-request``."""

    repository_id: str = Field(min_length=1, pattern=NON_BLANK, description='ID of the repository')
    title: str = Field(min_length=1, pattern=NON_BLANK, description='Title of the pull request')
    description: str = Field(description='Description of the pull request')
    source_branch: str = Field(min_length=1, pattern=NON_BLANK, description='Source branch name')
    target_branch: str = Field(min_length=1, pattern=NON_BLANK, description='Target branch name')


class CommentOnPullRequestParameters(ToolParameters):
    """Arguments of ``comment-on-pr``."""

    repository_id: str = Field(min_length=1, pattern=NON_BLANK, description='ID of the repository')
    pull_request_id: int = Field(ge=1, description='ID of the pull request')
    comment: str = Field(min_length=1, pattern=NON_BLANK, description='Comment to add')
    status: ThreadStatus = Field(default='active', description='Status of the comment thread')


class GetCommitsParameters(ToolParameters):
    """Arguments of ``get-commits``."""

    repository_id: str = Field(min_length=1, pattern=NON_BLANK, description='ID of the repository')
    branch: str = Field(min_length=1, pattern=NON_BLANK, description='Branch name')


class TriggerPipelineParameters(ToolParameters):
    """Arguments of ``trigger-pipeline``."""

    pipeline_id: int = Field(ge=1, description='ID of the pipeline')
    parameters: Dict[str, Any] = Field(description='Pipeline parameters')


@dataclass(frozen=True)
class ToolDescriptor:
    """A named, schema-validated operation."""

    name: str
    description: str
    parameters: ParameterSchema
    execute: Callable[[Any], Awaitable[str]]


class ToolRegistry:
    """Immutable catalog of tools, looked up by name."""

    def __init__(self, descriptors: Iterable[ToolDescriptor]) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._tools:
                raise ValueError(f'Duplicate tool name: {descriptor.name}')
            self._tools[descriptor.name] = descriptor

    def get(self, name: str) -> Optional[ToolDescriptor]:
        """Return the tool registered under ``name``, or None."""
        return self._tools.get(name)

    def names(self) -> List[str]:
        """Return tool names in registration order."""
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2)


class AzureDevOpsTools:
    """Tools for interacting with Azure DevOps resources."""

    def __init__(self, client: AzureDevOpsClient) -> None:
        """Initialize Azure DevOps Tools.

        Args:
            client: Shared API client used by every tool
        """
        self.client = client

    async def create_repo(self, args: CreateRepoParameters) -> str:
        """Create a new repository in the project.

        Args:
            args: Validated ``create-repo`` arguments

        Returns:
            Confirmation naming the repository and its ID
        """
        repo = await asyncio.to_thread(self.client.create_repository, args.name)
        return f'Repository {repo.name} created successfully with ID {repo.id}'

    async def list_repos(self, args: NoParameters) -> str:
        """List all repositories in the project.

        Returns:
            Pretty-printed JSON array of repositories
        """
        repos = await asyncio.to_thread(self.client.list_repositories)
        return _to_json(repos)

    async def get_branches(self, args: GetBranchesParameters) -> str:
        """List all branches of a repository.

        Args:
            args: Validated ``get-branches`` arguments

        Returns:
            Pretty-printed JSON array of refs
        """
        branches = await asyncio.to_thread(self.client.get_branches, args.repository_id)
        return _to_json(branches)

    async def create_pull_request(self, args: CreatePullRequestParameters) -> str:
        """Create a pull request from one branch to another.

        Args:
            args: Validated ``create-pull-request`` arguments

        Returns:
            Confirmation naming the new pull request ID
        """
        pr = await asyncio.to_thread(
            self.client.create_pull_request,
            args.repository_id,
            args.title,
            args.description,
            args.source_branch,
            args.target_branch,
        )
        return f'Pull request #{pr.pull_request_id} created successfully'

    async def comment_on_pr(self, args: CommentOnPullRequestParameters) -> str:
        """Leave a comment on an existing pull request.

        Args:
            args: Validated ``comment-on-pr`` arguments, status defaulting to active

        Returns:
            Confirmation message
        """
        await asyncio.to_thread(
            self.client.comment_on_pull_request,
            args.repository_id,
            args.pull_request_id,
            args.comment,
            args.status,
        )
        return 'Comment added successfully'

    async def get_commits(self, args: GetCommitsParameters) -> str:
        """Get the commit history of a repository branch.

        Args:
            args: Validated ``get-commits`` arguments

        Returns:
            Pretty-printed JSON array of commits
        """
        commits = await asyncio.to_thread(
            self.client.get_commits, args.repository_id, args.branch
        )
        return _to_json(commits)

    async def trigger_pipeline(self, args: TriggerPipelineParameters) -> str:
        """Queue a pipeline run.

        Args:
            args: Validated ``trigger-pipeline`` arguments

        Returns:
            Confirmation message
        """
        await asyncio.to_thread(self.client.trigger_pipeline, args.pipeline_id, args.parameters)
        return 'Pipeline triggered successfully'

    async def list_pipelines(self, args: NoParameters) -> str:
        """List all pipelines in the project.

        Returns:
            Pretty-printed JSON array of pipelines
        """
        pipelines = await asyncio.to_thread(self.client.list_pipelines)
        return _to_json(pipelines)

    def descriptors(self) -> List[ToolDescriptor]:
        """Return the descriptors of every tool, in advertising order."""
        return [
            ToolDescriptor(
                name='create-repo',
                description='Create a new repository in Azure DevOps',
                parameters=ParameterSchema(CreateRepoParameters),
                execute=self.create_repo,
            ),
            ToolDescriptor(
                name='list-repos',
                description='List all repositories in the project',
                parameters=ParameterSchema(NoParameters),
                execute=self.list_repos,
            ),
            ToolDescriptor(
                name='get-branches',
                description='List all branches of a repository',
                parameters=ParameterSchema(GetBranchesParameters),
                execute=self.get_branches,
            ),
            ToolDescriptor(
                name='create-pull-request',
                description='Create a pull request from one branch to another',
                parameters=ParameterSchema(CreatePullRequestParameters),
                execute=self.create_pull_request,
            ),
            ToolDescriptor(
                name='comment-on-pr',
                description='Leave a comment on an existing pull request',
                parameters=ParameterSchema(CommentOnPullRequestParameters),
                execute=self.comment_on_pr,
            ),
            ToolDescriptor(
                name='get-commits',
                description='Get commit history for a repository',
                parameters=ParameterSchema(GetCommitsParameters),
                execute=self.get_commits,
            ),
            ToolDescriptor(
                name='trigger-pipeline',
                description='Trigger a CI pipeline with parameters',
                parameters=ParameterSchema(TriggerPipelineParameters),
                execute=self.trigger_pipeline,
            ),
            ToolDescriptor(
                name='list-pipelines',
                description='List all pipelines in the project',
                parameters=ParameterSchema(NoParameters),
                execute=self.list_pipelines,
            ),
        ]


def build_tool_registry(client: AzureDevOpsClient) -> ToolRegistry:
    """Build the registry of all Azure DevOps tools around one shared client."""
    return ToolRegistry(AzureDevOpsTools(client).descriptors())
