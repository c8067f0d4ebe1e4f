"""MCP front-end tests."""

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import TextContent
from tl.ado_tools_server import server as server_module
from tl.ado_tools_server.server import SSE_PATH, AzureDevOpsMCP, create_server, main
from unittest.mock import patch


@pytest.fixture
def mcp_server(config) -> AzureDevOpsMCP:
    return create_server(config)


@pytest.mark.asyncio
async def test_list_tools_advertises_registry(mcp_server) -> None:
    tools = await mcp_server.list_tools()

    assert [t.name for t in tools] == mcp_server.dispatcher.registry.names()
    create_pr = next(t for t in tools if t.name == 'create-pull-request')
    assert create_pr.description == 'Create a pull request from one branch to another'
    assert set(create_pr.inputSchema['properties']) == {
        'repositoryId',
        'title',
        'description',
        'sourceBranch',
        'targetBranch',
    }


def test_create_server_uses_configured_port(mcp_server, config) -> None:
    assert mcp_server.settings.port == config.port
    assert mcp_server.settings.sse_path == SSE_PATH


@pytest.mark.asyncio
async def test_call_tool_returns_text_content(mcp_server, make_response) -> None:
    body = {'value': [{'id': 1, 'name': 'ci'}]}

    with patch('requests.get', return_value=make_response(json_body=body)):
        content = await mcp_server.call_tool('list-pipelines', {})

    assert len(content) == 1
    assert isinstance(content[0], TextContent)
    assert '"name": "ci"' in content[0].text


@pytest.mark.asyncio
async def test_call_tool_reports_unknown_tool(mcp_server) -> None:
    with pytest.raises(ToolError) as exc:
        await mcp_server.call_tool('merge-everything', {})

    assert 'Unknown tool "merge-everything"' in str(exc.value)


@pytest.mark.asyncio
async def test_call_tool_reports_invalid_arguments(mcp_server) -> None:
    with patch('requests.post') as mock_post:
        with pytest.raises(ToolError) as exc:
            await mcp_server.call_tool('trigger-pipeline', {'pipelineId': 'ci'})

    mock_post.assert_not_called()
    assert 'pipelineId' in str(exc.value)
    assert 'parameters' in str(exc.value)


@pytest.mark.asyncio
async def test_call_tool_reports_remote_failure(mcp_server, make_response) -> None:
    response = make_response(401, text='Unauthorized')

    with patch('requests.get', return_value=response):
        with pytest.raises(ToolError) as exc:
            await mcp_server.call_tool('list-repos', {})

    assert 'HTTP 401' in str(exc.value)


@pytest.mark.asyncio
async def test_call_tool_reports_unexpected_failure(mcp_server) -> None:
    with patch('requests.get', side_effect=RuntimeError('boom')):
        with pytest.raises(ToolError) as exc:
            await mcp_server.call_tool('list-repos', {})

    assert 'Error executing tool list-repos: boom' in str(exc.value)


def test_main_exits_on_configuration_error(monkeypatch) -> None:
    for name in ('AZURE_DEVOPS_ORG', 'AZURE_DEVOPS_PROJECT', 'AZURE_DEVOPS_PAT'):
        monkeypatch.delenv(name, raising=False)

    with patch.object(server_module, 'load_dotenv_file'), patch.object(AzureDevOpsMCP, 'run') as mock_run:
        with pytest.raises(SystemExit) as exc:
            main()

    assert exc.value.code == 1
    mock_run.assert_not_called()


def test_main_runs_selected_transport(monkeypatch) -> None:
    monkeypatch.setenv('AZURE_DEVOPS_ORG', 'contoso')
    monkeypatch.setenv('AZURE_DEVOPS_PROJECT', 'web')
    monkeypatch.setenv('AZURE_DEVOPS_PAT', 'secret')
    monkeypatch.setenv('TRANSPORT_TYPE', 'sse')
    monkeypatch.setenv('PORT', '9123')
    monkeypatch.delenv('LOGFIRE_WRITE_TOKEN', raising=False)

    with patch.object(server_module, 'load_dotenv_file'), patch.object(
        server_module, 'setup_logging'
    ) as mock_logging, patch.object(AzureDevOpsMCP, 'run') as mock_run:
        main()

    mock_logging.assert_called_once_with(None)
    mock_run.assert_called_once_with(transport='sse')
