from __future__ import annotations
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union
import requests
from .exceptions import RequestError, ResponseError

logger = logging.getLogger(__name__)

API_URL = 'https://app.smartfile.com/'
API_VER = '2.1'
HTTP_USER_AGENT = 'SmartFile Python API client v{0}'
THROTTLE_HEADER = 'X-Throttle'
THROTTLE_PATTERN = re.compile(r'^.*; next=([\d.]+) sec$')
THROTTLE_STATUS = 503
MAX_ATTEMPTS = 3

Sender = Callable[[requests.PreparedRequest], requests.Response]


def normalize_path(path: str) -> str:
    """Force a single trailing slash and collapse repeated slashes."""
    if not path.endswith('/'):
        path += '/'
    return re.sub(r'/{2,}', '/', path)


def build_path(version: str, endpoint: str, id: Any = None) -> str:
    parts = ['api', str(version), str(endpoint)]
    if id is not None:
        parts.append(str(id))
    return normalize_path('/'.join(parts))


@dataclass(frozen=True)
class ClientConfig:
    url: str = API_URL
    version: str = API_VER
    throttle_wait: bool = True
    timeout: Optional[float] = None

    def __post_init__(self):
        # base url always ends with exactly one slash so paths can be appended
        object.__setattr__(self, 'url', self.url.rstrip('/') + '/')


@dataclass(frozen=True)
class ThrottleDirective:
    """Wait requested by the server through the X-Throttle header."""
    wait: float

    @classmethod
    def from_header(cls, header: Optional[str]) -> Optional['ThrottleDirective']:
        if not header:
            return None
        match = THROTTLE_PATTERN.match(header.strip())
        if match is None:
            return None
        try:
            return cls(float(match.group(1)))
        except ValueError:
            return None

    @property
    def milliseconds(self) -> int:
        return int(self.wait * 1000)


@dataclass(frozen=True)
class Success:
    response: requests.Response


@dataclass(frozen=True)
class Retryable:
    directive: ThrottleDirective
    error: ResponseError


@dataclass(frozen=True)
class Fatal:
    error: ResponseError


Outcome = Union[Success, Retryable, Fatal]


class Client:
    """Dispatches SmartFile API calls and honours the server's throttle directive.

    ``wrap_send`` receives the plain sender and returns the one actually used,
    which is how authentication gets injected (see ``BasicClient``).
    When the last attempt is throttled too, no sleep happens before
    ``RequestError`` is raised, since no retry follows.
    """

    def __init__(self, url: str = API_URL, version: str = API_VER, throttle_wait: bool = True,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None,
                 wrap_send: Optional[Callable[[Sender], Sender]] = None):
        self.config = ClientConfig(url=url, version=version, throttle_wait=throttle_wait, timeout=timeout)
        self.session = session or requests.Session()
        self._send: Sender = wrap_send(self._do_request) if wrap_send else self._do_request

    @property
    def url(self) -> str:
        return self.config.url

    @property
    def version(self) -> str:
        return self.config.version

    @property
    def throttle_wait(self) -> bool:
        return self.config.throttle_wait

    def url_for(self, endpoint: str, id: Any = None) -> str:
        return self.config.url + build_path(self.config.version, endpoint, id)

    def _do_request(self, request: requests.PreparedRequest) -> requests.Response:
        try:
            settings = self.session.merge_environment_settings(request.url, {}, None, None, None)
            response = self.session.send(request, timeout=self.config.timeout, **settings)
        except requests.RequestException as e:
            raise RequestError(f"Network error: {e}") from e
        if not 200 <= response.status_code < 300:
            raise ResponseError(response)
        return response

    def _prepare(self, method: str, url: str, data: Dict[str, Any] | None = None,
                 query: Dict[str, Any] | None = None) -> requests.PreparedRequest:
        headers = {'User-Agent': HTTP_USER_AGENT.format(self.config.version)}
        request = requests.Request(method, url, headers=headers, data=data, params=query)
        return self.session.prepare_request(request)

    def _throttle_directive(self, error: ResponseError) -> Optional[ThrottleDirective]:
        if not self.config.throttle_wait or error.status_code != THROTTLE_STATUS:
            return None
        return ThrottleDirective.from_header(error.response.headers.get(THROTTLE_HEADER))

    def _attempt(self, request: requests.PreparedRequest) -> Outcome:
        try:
            return Success(self._send(request))
        except ResponseError as e:
            directive = self._throttle_directive(e)
            if directive is None:
                return Fatal(e)
            return Retryable(directive, e)

    def _request(self, method: str, endpoint: str, id: Any = None, *, data: Dict[str, Any] | None = None,
                 query: Dict[str, Any] | None = None) -> requests.Response:
        prepared = self._prepare(method, self.url_for(endpoint, id), data=data, query=query)
        attempt = 0
        while attempt < MAX_ATTEMPTS:
            attempt += 1
            logger.debug("%s %s attempt=%s", method, prepared.url, attempt)
            # senders may decorate the request, so every attempt gets its own copy
            outcome = self._attempt(prepared.copy())
            if isinstance(outcome, Success):
                return outcome.response
            if isinstance(outcome, Fatal):
                raise outcome.error
            logger.warning("Throttled (%s) on %s %s, attempt %s/%s, next in %.3fs",
                           outcome.error.status_code, method, prepared.url, attempt, MAX_ATTEMPTS,
                           outcome.directive.wait)
            if attempt < MAX_ATTEMPTS:
                time.sleep(outcome.directive.milliseconds / 1000.0)
        raise RequestError(f"Could not complete request after {attempt} tries.", attempts=attempt)

    def get(self, endpoint: str, id: Any = None, data: Dict[str, Any] | None = None) -> requests.Response:
        return self._request('GET', endpoint, id, query=data)

    def put(self, endpoint: str, id: Any = None, data: Dict[str, Any] | None = None) -> requests.Response:
        return self._request('PUT', endpoint, id, data=data)

    def post(self, endpoint: str, id: Any = None, data: Dict[str, Any] | None = None) -> requests.Response:
        return self._request('POST', endpoint, id, data=data)

    def delete(self, endpoint: str, id: Any = None, data: Dict[str, Any] | None = None) -> requests.Response:
        return self._request('DELETE', endpoint, id, query=data)

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
