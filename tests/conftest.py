"""Shared fixtures for the Azure DevOps tool server tests."""

import json
import logfire
import pytest
import requests
from tl.ado_tools_server.ado_client import AzureDevOpsClient
from tl.ado_tools_server.config import ADOConfig
from typing import Any, Callable, Optional


logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def config() -> ADOConfig:
    return ADOConfig(
        organization='contoso',
        project='web',
        personal_access_token='secret',
    )


@pytest.fixture
def client(config: ADOConfig) -> AzureDevOpsClient:
    return AzureDevOpsClient(config)


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Build real ``requests.Response`` objects for mocked HTTP calls."""

    def _make(
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        url: str = 'https://dev.azure.com/contoso/web/_apis',
    ) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response.url = url
        if json_body is not None:
            response._content = json.dumps(json_body).encode()
            response.headers['Content-Type'] = 'application/json'
        elif text is not None:
            response._content = text.encode()
        else:
            response._content = b''
        response.encoding = 'utf-8'
        return response

    return _make
