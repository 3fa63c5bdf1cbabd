from dataclasses import dataclass
from http import HTTPStatus

import pytest

from kate import methods
from kate.log.context import background


class FakeWriter:
    def __init__(self):
        self.headers = {}
        self.status_code = None
        self.raw_body = b""

    def write_header(self, status):
        if self.status_code is None:
            self.status_code = status

    def write(self, data):
        if self.status_code is None:
            self.status_code = int(HTTPStatus.OK)
        self.raw_body += data


@dataclass
class FakeRequest:
    method: str


WRAPPERS = [
    (methods.head, "HEAD"),
    (methods.options, "OPTIONS"),
    (methods.get, "GET"),
    (methods.post, "POST"),
    (methods.put, "PUT"),
    (methods.delete, "DELETE"),
    (methods.patch, "PATCH"),
]


def _recording_handler(calls):
    def handler(ctx, w, r):
        calls.append(r.method)
        w.write(b"ok")

    return handler


@pytest.mark.parametrize("wrapper,method", WRAPPERS)
def test_allowed_method_reaches_handler(wrapper, method):
    calls = []
    writer = FakeWriter()
    wrapped = wrapper(_recording_handler(calls))
    result = wrapped(background(), writer, FakeRequest(method))
    assert result is None
    assert calls == [method]
    assert writer.raw_body == b"ok"
    assert writer.status_code == HTTPStatus.OK


@pytest.mark.parametrize("wrapper,method", WRAPPERS)
def test_other_method_is_rejected(wrapper, method):
    calls = []
    writer = FakeWriter()
    wrapped = wrapper(_recording_handler(calls))
    result = wrapped(background(), writer, FakeRequest("TRACE"))
    assert result is None
    assert calls == []
    assert writer.status_code == HTTPStatus.METHOD_NOT_ALLOWED
    assert writer.raw_body == HTTPStatus.METHOD_NOT_ALLOWED.phrase.encode()


def test_request_method_is_case_insensitive():
    calls = []
    writer = FakeWriter()
    wrapped = methods.method_only("POST", _recording_handler(calls))
    result = wrapped(background(), writer, FakeRequest("post"))
    assert result is None
    assert calls == ["post"]
    assert writer.raw_body == b"ok"