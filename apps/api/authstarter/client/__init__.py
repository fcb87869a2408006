from authstarter.client.api import AuthApiClient
from authstarter.client.errors import AuthClientError
from authstarter.client.session import AuthSession

__all__ = ["AuthApiClient", "AuthClientError", "AuthSession"]
