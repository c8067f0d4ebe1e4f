"""Error message and payload tests."""

from tl.ado_tools_server.errors import (
    FieldViolation,
    InvalidArgumentsError,
    RemoteApiError,
    UnknownToolError,
)


def test_remote_api_error_extracts_service_message() -> None:
    err = RemoteApiError(
        400,
        {'message': 'A Git repository with the name demo already exists.', 'typeKey': 'x'},
        method='POST',
        url='https://dev.azure.com/contoso/web/_apis/git/repositories',
    )

    assert err.status_code == 400
    assert err.remote_message == 'A Git repository with the name demo already exists.'
    assert str(err).startswith('Azure DevOps API returned HTTP 400 for POST https://')
    assert str(err).endswith('already exists.')


def test_remote_api_error_without_body() -> None:
    err = RemoteApiError(503, '')

    assert err.remote_message is None
    assert str(err) == 'Azure DevOps API returned HTTP 503'


def test_invalid_arguments_error_lists_violations() -> None:
    err = InvalidArgumentsError(
        'create-repo',
        [FieldViolation('name', 'Field required', 'missing')],
    )

    assert str(err) == 'Invalid arguments for tool "create-repo": name: Field required'


def test_unknown_tool_error_lists_available_tools() -> None:
    err = UnknownToolError('nope', ['create-repo', 'list-repos'])

    assert str(err) == 'Unknown tool "nope". Available tools: create-repo, list-repos'
