"""Shared fixtures."""

from unittest import mock

import pytest
import requests

from gitrelease.config import get_config, reset_config

from .helpers import FakeApi

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GITLAB_TOKEN", "BITBUCKET_TOKEN")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's config file and tokens out of every test."""
    for var_name in TOKEN_ENV_VARS:
        monkeypatch.delenv(var_name, raising=False)
    reset_config()
    get_config(str(tmp_path / "gitrelease.yml"))
    yield
    reset_config()


@pytest.fixture
def fake_api():
    """Route every HTTP request of project holders to a FakeApi."""
    api = FakeApi()
    with mock.patch.object(requests.Session, "request", autospec=True, side_effect=api):
        yield api
