"""Client for the SmartFile file-storage REST API.

Usage example:
    from smartfile import BasicClient
    client = BasicClient('**key**', '**password**')
    response = client.get('/path/info', '/')
    print(response.json())
"""
from .base_client import API_URL, API_VER, Client, ClientConfig, ThrottleDirective, build_path  # noqa: F401
from .basic_client import BasicClient, Credentials, is_valid_token  # noqa: F401
from .exceptions import APIError, ConfigurationError, RequestError, ResponseError  # noqa: F401
