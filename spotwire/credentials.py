"""
Spotify credentials management.

Provides a dataclass for Spotify application credentials and
helpers that turn them into grant flows.
"""

import os
from dataclasses import dataclass
from typing import Iterable, Optional

from dotenv import load_dotenv

from .flows import AuthCodeFlow, AuthCodePkceFlow, ClientCredentialsFlow


@dataclass(frozen=True)
class SpotifyCredentials:
    """
    Immutable container for Spotify application credentials.

    Only client_id is always required; which of the other fields a
    flow needs is checked when the flow is built.

    Attributes:
        client_id: The Spotify application client ID.
        client_secret: The Spotify application client secret.
        redirect_uri: The OAuth callback URL.

    Example:
        credentials = SpotifyCredentials.from_env()
        flow = credentials.pkce_flow(scopes=[Scope.USER_LIBRARY_READ])
        client = SpotifyClient(flow)
    """

    client_id: str
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None

    def __post_init__(self):
        """Validate credentials on creation."""
        if not self.client_id:
            raise ValueError("client_id is required")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "SpotifyCredentials":
        """
        Create credentials from environment variables.

        Reads SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET and
        SPOTIFY_REDIRECT_URI, loading a ``.env`` file first.

        Raises:
            ValueError: If SPOTIFY_CLIENT_ID is missing.
        """
        load_dotenv(dotenv_path)
        return cls(
            client_id=os.getenv("SPOTIFY_CLIENT_ID", ""),
            client_secret=os.getenv("SPOTIFY_CLIENT_SECRET") or None,
            redirect_uri=os.getenv("SPOTIFY_REDIRECT_URI") or None,
        )

    def auth_code_flow(self, scopes: Iterable[str] = ()) -> AuthCodeFlow:
        return AuthCodeFlow(
            client_id=self.client_id,
            client_secret=self.client_secret or "",
            redirect_uri=self.redirect_uri or "",
            scopes=tuple(scopes),
        )

    def pkce_flow(self, scopes: Iterable[str] = ()) -> AuthCodePkceFlow:
        return AuthCodePkceFlow(
            client_id=self.client_id,
            redirect_uri=self.redirect_uri or "",
            scopes=tuple(scopes),
        )

    def client_credentials_flow(
        self, scopes: Iterable[str] = ()
    ) -> ClientCredentialsFlow:
        return ClientCredentialsFlow(
            client_id=self.client_id,
            client_secret=self.client_secret or "",
            scopes=tuple(scopes),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary, omitting the secret."""
        return {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
        }
