"""Shared fixtures: a mocked transport session and canned responses."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from featherclient.auth.credentials import MemoryTokenStore
from featherclient.rest.client import RestClient

BASE_URL = "http://api.test"


def make_response(status=200, body=None, raw=None, url=BASE_URL):
    """Return a real :class:`requests.Response` with a canned body.

    Args:
        status: HTTP status code.
        body: Object serialised as the JSON body.  ``None`` yields an empty
            body unless *raw* is given.
        raw: Raw body bytes, used verbatim.
        url: URL reported by the response.
    """
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if raw is not None:
        response._content = raw
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture()
def respond():
    return make_response


@pytest.fixture()
def session():
    """A transport double; ``session.request`` returns canned responses."""
    mock = MagicMock()
    mock.headers = {}
    mock.request.return_value = make_response(200, {"ok": True})
    return mock


@pytest.fixture()
def store():
    return MemoryTokenStore()


@pytest.fixture()
def client(session, store):
    return RestClient(BASE_URL, store, session=session)


class RecordingSession(requests.Session):
    """A real session whose ``send`` records the prepared request.

    Everything up to the wire (parameter encoding, multipart bodies,
    header merging) runs through ``requests`` itself.
    """

    def __init__(self, response=None):
        super().__init__()
        self.trust_env = False
        self.sent: list[requests.PreparedRequest] = []
        self.response = response or make_response(200, {"ok": True})

    def send(self, request, **kwargs):
        self.sent.append(request)
        return self.response

    @property
    def last(self) -> requests.PreparedRequest:
        return self.sent[-1]


@pytest.fixture()
def wire_session():
    return RecordingSession()


@pytest.fixture()
def wire_client(wire_session, store):
    return RestClient(BASE_URL, store, session=wire_session)
