from typing import Any, Dict


class Repository(Dict[str, Any]):
    """Git repository as returned by Azure DevOps."""

    def __init__(self, data: Dict[str, Any]):
        """Initialize a repository record.

        Args:
            data: Repository JSON object returned by the REST API
        """
        super().__init__(data)
        self.id: str = data.get('id', '')
        self.name: str = data.get('name', '')
        self.url: str = data.get('url', '')


class Branch(Dict[str, Any]):
    """Branch ref as returned by the refs endpoint."""

    def __init__(self, data: Dict[str, Any]):
        """Initialize a branch record.

        Args:
            data: Ref JSON object returned by the REST API
        """
        super().__init__(data)
        self.name: str = data.get('name', '')
        self.object_id: str = data.get('objectId', '')


class PullRequest(Dict[str, Any]):
    """Pull request as returned by Azure DevOps.

    ``status`` is one of notSet, active, abandoned or completed.
    """

    def __init__(self, data: Dict[str, Any]):
        """Initialize a pull request record.

        Args:
            data: Pull request JSON object returned by the REST API
        """
        super().__init__(data)
        self.pull_request_id: int = data.get('pullRequestId', 0)
        self.title: str = data.get('title', '')
        self.description: str = data.get('description', '')
        self.source_ref_name: str = data.get('sourceRefName', '')
        self.target_ref_name: str = data.get('targetRefName', '')
        self.status: str = data.get('status', 'notSet')


class CommitAuthor(Dict[str, Any]):
    """Author or committer signature of a commit."""

    def __init__(self, data: Dict[str, Any]):
        super().__init__(data)
        self.name: str = data.get('name', '')
        self.email: str = data.get('email', '')
        self.date: str = data.get('date', '')


class Commit(Dict[str, Any]):
    """Commit as returned by the commits endpoint."""

    def __init__(self, data: Dict[str, Any]):
        """Initialize a commit record.

        Args:
            data: Commit JSON object returned by the REST API
        """
        super().__init__(data)
        self.commit_id: str = data.get('commitId', '')
        self.author = CommitAuthor(data.get('author') or {})
        self.comment: str = data.get('comment', '')
