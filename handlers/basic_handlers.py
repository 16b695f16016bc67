"""Root, echo, user-agent and not-found route handlers."""

from errors import MissingRequiredHeaderError
from request import HEADER_ENCODING, HTTPRequest
from response import HTTPResponse

ECHO_PREFIX = "/echo/"
TEXT_PLAIN = "text/plain"


def root(request: HTTPRequest) -> HTTPResponse:
    _ = request
    return HTTPResponse(status_code=200)


def echo(request: HTTPRequest) -> HTTPResponse:
    message = request.path.removeprefix(ECHO_PREFIX)
    return HTTPResponse(
        status_code=200,
        headers={"Content-Type": TEXT_PLAIN},
        body=message.encode(HEADER_ENCODING),
    )


def user_agent(request: HTTPRequest) -> HTTPResponse:
    agent = request.get_header("User-Agent")
    if agent is None:
        raise MissingRequiredHeaderError("User-Agent")
    return HTTPResponse(
        status_code=200,
        headers={"Content-Type": TEXT_PLAIN},
        body=agent.encode(HEADER_ENCODING),
    )


def not_found(request: HTTPRequest) -> HTTPResponse:
    _ = request
    return HTTPResponse(status_code=404)
