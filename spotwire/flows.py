"""
OAuth2 grant flows.

Three flows are supported behind one interface:

    - AuthCodePkceFlow: Authorization Code with PKCE (no client secret)
    - AuthCodeFlow: Authorization Code with a client secret
    - ClientCredentialsFlow: application-only access, no user context

Every flow knows how to authenticate against the accounts service,
how a token request carries its client authentication, and whether
its tokens can be refreshed. The Implicit Grant flow is not supported.
"""

import base64
import hashlib
import hmac
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .exceptions import SpotifyInvalidStateError

if TYPE_CHECKING:
    from .auth import SpotifyAuthManager, TokenInfo

logger = logging.getLogger(__name__)

# RFC 7636: verifier length between 43 and 128 characters
_VERIFIER_BYTES = 64


def generate_code_verifier() -> str:
    """Generate a random PKCE code verifier."""
    return base64.urlsafe_b64encode(secrets.token_bytes(_VERIFIER_BYTES)).decode(
        "ascii"
    ).rstrip("=")


def generate_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge for a verifier."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate_state() -> str:
    """Generate a random CSRF state value."""
    return secrets.token_urlsafe(16)


@dataclass(frozen=True)
class Authorisation:
    """
    The user-facing half of an Authorization Code handshake.

    Attributes:
        url: URL the user opens to grant access.
        state: CSRF state that must come back on the redirect.
    """

    url: str
    state: str


class GrantFlow(ABC):
    """Interface shared by all grant flows."""

    client_id: str
    scopes: Tuple[str, ...]

    #: Whether tokens carry a user context, enabling user-scoped endpoints.
    user_authorised: bool = True

    def supports_refresh(self) -> bool:
        return True

    @abstractmethod
    def apply_client_auth(self, form: Dict[str, str], headers: Dict[str, str]) -> None:
        """Add client authentication to a token request in place."""

    @abstractmethod
    async def authenticate(
        self, auth_manager: "SpotifyAuthManager", *args
    ) -> "TokenInfo":
        """
        Obtain the first token of this flow.

        Args:
            auth_manager: Token endpoint client.
            *args: Flow specific. The Authorization Code flows take
                ``(authorisation, code, state)``: the Authorisation
                built for the user, then the ``code`` and ``state``
                query parameters from the redirect. Client Credentials
                takes nothing.

        Raises:
            SpotifyAuthError: If the token endpoint rejects the request.
        """

    def _basic_auth(self, client_secret: str, headers: Dict[str, str]) -> None:
        raw = f"{self.client_id}:{client_secret}".encode("utf-8")
        headers["Authorization"] = "Basic " + base64.b64encode(raw).decode("ascii")

    @property
    def scope_string(self) -> str:
        return " ".join(str(s) for s in self.scopes)


class _AuthCodeFlowBase(GrantFlow):
    """Shared two-step handshake of the Authorization Code flows."""

    redirect_uri: str

    def _extra_auth_params(self) -> Dict[str, str]:
        return {}

    def _extra_token_params(self) -> Dict[str, str]:
        return {}

    def authorisation(
        self, auth_manager: "SpotifyAuthManager", state: Optional[str] = None
    ) -> Authorisation:
        """
        Build the authorization URL for the user to visit.

        The URL is returned, never fetched. Keep the returned
        Authorisation until the redirect comes back.

        Args:
            auth_manager: Token endpoint client.
            state: CSRF state; a random one is generated when omitted.
        """
        state = state or generate_state()
        url = auth_manager.get_auth_url(
            self.client_id,
            self.redirect_uri,
            list(self.scopes),
            state,
            self._extra_auth_params(),
        )
        return Authorisation(url=url, state=state)

    async def authenticate(
        self,
        auth_manager: "SpotifyAuthManager",
        authorisation: Authorisation,
        code: str,
        state: str,
    ) -> "TokenInfo":
        """
        Exchange the authorization code from the redirect for a token.

        Raises:
            SpotifyInvalidStateError: If ``state`` does not match the
                state of ``authorisation``. Nothing is sent.
            SpotifyAuthError: If the code is rejected (invalid, expired,
                or the PKCE verifier does not match).
        """
        if not hmac.compare_digest(
            str(state).encode("utf-8"), authorisation.state.encode("utf-8")
        ):
            logger.warning("OAuth state mismatch, refusing code exchange")
            raise SpotifyInvalidStateError("State parameter does not match")
        if not code:
            raise ValueError("Authorization code is required")

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        data.update(self._extra_token_params())
        return await auth_manager.request_token(self, data)


@dataclass(frozen=True)
class AuthCodePkceFlow(_AuthCodeFlowBase):
    """
    Authorization Code flow with Proof Key for Code Exchange.

    Suitable for clients that cannot keep a secret. The code verifier
    is generated when the flow is built unless one is supplied.
    """

    client_id: str
    redirect_uri: str
    scopes: Tuple[str, ...] = ()
    code_verifier: str = field(default_factory=generate_code_verifier, repr=False)

    def __post_init__(self):
        if not self.client_id:
            raise ValueError("client_id is required")
        if not self.redirect_uri:
            raise ValueError("redirect_uri is required")
        if not 43 <= len(self.code_verifier) <= 128:
            raise ValueError("code_verifier must be 43 to 128 characters")
        object.__setattr__(self, "scopes", tuple(self.scopes))

    @property
    def code_challenge(self) -> str:
        return generate_code_challenge(self.code_verifier)

    def _extra_auth_params(self) -> Dict[str, str]:
        return {
            "code_challenge_method": "S256",
            "code_challenge": self.code_challenge,
        }

    def _extra_token_params(self) -> Dict[str, str]:
        return {"code_verifier": self.code_verifier}

    def apply_client_auth(self, form: Dict[str, str], headers: Dict[str, str]) -> None:
        form["client_id"] = self.client_id


@dataclass(frozen=True)
class AuthCodeFlow(_AuthCodeFlowBase):
    """Authorization Code flow authenticated with the client secret."""

    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    scopes: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.client_id:
            raise ValueError("client_id is required")
        if not self.client_secret:
            raise ValueError("client_secret is required")
        if not self.redirect_uri:
            raise ValueError("redirect_uri is required")
        object.__setattr__(self, "scopes", tuple(self.scopes))

    def apply_client_auth(self, form: Dict[str, str], headers: Dict[str, str]) -> None:
        self._basic_auth(self.client_secret, headers)


@dataclass(frozen=True)
class ClientCredentialsFlow(GrantFlow):
    """
    Client Credentials flow.

    Tokens carry no user context and come without a refresh token,
    so only catalog endpoints are available and refresh is impossible.
    """

    client_id: str
    client_secret: str = field(repr=False)
    scopes: Tuple[str, ...] = ()

    user_authorised = False

    def __post_init__(self):
        if not self.client_id:
            raise ValueError("client_id is required")
        if not self.client_secret:
            raise ValueError("client_secret is required")
        object.__setattr__(self, "scopes", tuple(self.scopes))

    def supports_refresh(self) -> bool:
        return False

    def apply_client_auth(self, form: Dict[str, str], headers: Dict[str, str]) -> None:
        self._basic_auth(self.client_secret, headers)

    async def authenticate(self, auth_manager: "SpotifyAuthManager") -> "TokenInfo":
        """Request an application token. No user interaction is involved."""
        data = {"grant_type": "client_credentials"}
        if self.scopes:
            data["scope"] = self.scope_string
        return await auth_manager.request_token(self, data)
