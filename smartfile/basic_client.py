from __future__ import annotations
import base64
from dataclasses import dataclass
from typing import Optional
import requests
from .base_client import API_URL, API_VER, Client, Sender
from .config import KEY_ENV, PASSWORD_ENV, THROTTLE_WAIT_ENV, URL_ENV, VERSION_ENV, env, env_flag
from .exceptions import ConfigurationError

MIN_TOKEN_LENGTH = 30


def is_valid_token(token: Optional[str]) -> bool:
    """Coarse sanity check: a non-empty string of at least 30 characters."""
    return isinstance(token, str) and len(token) >= MIN_TOKEN_LENGTH


def resolve_token(explicit: Optional[str], env_name: str) -> str:
    if is_valid_token(explicit):
        return explicit  # type: ignore[return-value]
    from_env = env(env_name)
    if is_valid_token(from_env):
        return from_env  # type: ignore[return-value]
    raise ConfigurationError("Please provide an API key and password. Use arguments or environment variables.")


@dataclass(frozen=True)
class Credentials:
    key: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(key='{self.key[:4]}...', password='***')"

    @property
    def authorization(self) -> str:
        token = base64.b64encode(f"{self.key}:{self.password}".encode('utf-8')).decode('ascii')
        return f"Basic {token}"


def basic_auth_sender(credentials: Credentials, send: Sender) -> Sender:
    """Wrap ``send`` so every request carries an explicit Basic Authorization header."""
    def _send(request: requests.PreparedRequest) -> requests.Response:
        # set up front instead of waiting for a 401 challenge
        request.headers['Authorization'] = credentials.authorization
        return send(request)
    return _send


class BasicClient(Client):
    """SmartFile client authenticating with an API key and password."""

    def __init__(self, key: Optional[str] = None, password: Optional[str] = None, url: str = API_URL,
                 version: str = API_VER, throttle_wait: bool = True, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.credentials = Credentials(resolve_token(key, KEY_ENV), resolve_token(password, PASSWORD_ENV))
        super().__init__(url=url, version=version, throttle_wait=throttle_wait, timeout=timeout,
                         session=session, wrap_send=lambda send: basic_auth_sender(self.credentials, send))

    @classmethod
    def from_env(cls, timeout: Optional[float] = None) -> 'BasicClient':
        return cls(
            url=env(URL_ENV, API_URL),
            version=env(VERSION_ENV, API_VER),
            throttle_wait=env_flag(THROTTLE_WAIT_ENV, True),
            timeout=timeout,
        )
