"""Helper functions for tests."""
import json
import sys
from contextlib import contextmanager
from http import HTTPStatus
from urllib.parse import urlencode

import requests


@contextmanager
def captured_exit_code():
    """Capture the exit code of a function."""
    exit_code = None

    def mock_exit(code=0):
        """Mock the exit function."""
        nonlocal exit_code
        exit_code = code

    original_exit = sys.exit
    sys.exit = mock_exit
    try:
        yield lambda: exit_code
    finally:
        sys.exit = original_exit


def make_response(status_code=200, json_data=None, headers=None, text=None, url=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = HTTPStatus(status_code).phrase
    if text is None:
        text = json.dumps(json_data)
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    response.url = url
    return response


def tag_records(names):
    """Tag listing records as GitHub and GitLab return them."""
    return [{"name": name} for name in names]


class FakeApi:
    """Stand-in for requests.Session.request answering from a route table.

    Routes are keyed by the full URL including the query string built from
    ``params``. A route value is either a Response or an exception to raise.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, url, response, params=None):
        self.routes[self.key(url, params)] = response
        return self

    @staticmethod
    def key(url, params):
        if params:
            return f"{url}?{urlencode(params)}"
        return url

    def __call__(self, session, method, url, **kwargs):
        self.calls.append(
            {
                "method": method,
                "url": self.key(url, kwargs.get("params")),
                "headers": dict(session.headers),
                "timeout": kwargs.get("timeout"),
            }
        )
        key = self.key(url, kwargs.get("params"))
        if key not in self.routes:
            raise AssertionError(f"Unexpected request to {key}")
        result = self.routes[key]
        if isinstance(result, Exception):
            raise result
        result.url = key
        return result

    @property
    def urls(self):
        return [call["url"] for call in self.calls]
