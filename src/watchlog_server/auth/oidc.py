"""OpenID Connect client (authorization code flow with PKCE)."""

import logging
from typing import Any, Optional

import httpx
from authlib.common.security import generate_token
from authlib.common.urls import add_params_to_uri
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.jose import JsonWebKey, jwt

from ..core.config import settings
from ..core.errors import ConfigurationError, NetworkError
from ..models.user import User
from ..services.cache import TTLCache

logger = logging.getLogger(__name__)


def new_code_verifier() -> str:
    """Random PKCE code verifier (RFC 7636, 43-128 chars)."""
    return generate_token(64)


def new_state() -> str:
    """Random anti-forgery state value."""
    return generate_token(32)


def user_from_claims(claims: dict[str, Any]) -> User:
    """Build a user from ID token claims."""
    name = claims.get("name")
    if not name:
        parts = [claims.get("first_name"), claims.get("last_name")]
        name = " ".join(p for p in parts if p) or None

    return User(
        id=str(claims["sub"]),
        email=claims.get("email"),
        name=name,
        profile_image_url=claims.get("picture") or claims.get("profile_image_url"),
    )


class OIDCClient:
    """Wraps provider discovery, the PKCE code exchange and logout URLs."""

    def __init__(
        self,
        issuer_url: str,
        client_id: Optional[str],
        client_secret: Optional[str] = None,
        scope: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize OIDC client.

        Args:
            issuer_url: Provider issuer URL (discovery base)
            client_id: Registered client ID
            client_secret: Client secret for confidential clients
            scope: Requested scopes
            transport: Optional HTTP transport (for tests)
        """
        self.issuer_url = issuer_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope or settings.oidc_scope
        self._transport = transport
        self._client = httpx.AsyncClient(timeout=30.0, transport=transport)
        self._metadata = TTLCache(settings.oidc_config_ttl_seconds)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _require_client_id(self) -> str:
        if not self.client_id:
            raise ConfigurationError("OIDC is not configured. Please set WATCHLOG_OIDC_CLIENT_ID.")
        return self.client_id

    async def _get_json(self, url: str) -> dict[str, Any]:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"OIDC request failed: GET {url} -> {e}")
            raise NetworkError(f"Identity provider request failed: {e}") from e

    async def get_provider_metadata(self) -> dict[str, Any]:
        """Fetch the discovery document, cached for the configured TTL."""
        metadata = self._metadata.get("discovery")
        if metadata is None:
            metadata = await self._get_json(f"{self.issuer_url}/.well-known/openid-configuration")
            self._metadata.set("discovery", metadata)
        return metadata

    async def _get_jwks(self, jwks_uri: str) -> dict[str, Any]:
        jwks = self._metadata.get("jwks")
        if jwks is None:
            jwks = await self._get_json(jwks_uri)
            self._metadata.set("jwks", jwks)
        return jwks

    def _oauth_client(self, redirect_uri: str) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self._require_client_id(),
            client_secret=self.client_secret,
            scope=self.scope,
            redirect_uri=redirect_uri,
            code_challenge_method="S256",
            token_endpoint_auth_method="client_secret_post" if self.client_secret else "none",
            transport=self._transport,
            timeout=30.0,
        )

    async def build_authorization_url(self, redirect_uri: str, state: str, code_verifier: str) -> str:
        """
        Build the authorization endpoint redirect.

        Args:
            redirect_uri: Callback URL
            state: Anti-forgery state stored in the session
            code_verifier: PKCE verifier stored in the session

        Returns:
            Authorization URL with S256 code challenge
        """
        metadata = await self.get_provider_metadata()
        async with self._oauth_client(redirect_uri) as client:
            url, _ = client.create_authorization_url(
                metadata["authorization_endpoint"],
                state=state,
                code_verifier=code_verifier,
                prompt="login consent",
            )
        return url

    async def exchange_code(
        self, authorization_response: str, redirect_uri: str, code_verifier: str, state: str
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """
        Exchange the authorization code for tokens and validate the ID token.

        Args:
            authorization_response: Full callback URL including query
            redirect_uri: Callback URL used in the authorization request
            code_verifier: PKCE verifier from the session
            state: Expected state from the session

        Returns:
            Tuple of (token response, ID token claims)
        """
        metadata = await self.get_provider_metadata()
        async with self._oauth_client(redirect_uri) as client:
            token = await client.fetch_token(
                metadata["token_endpoint"],
                authorization_response=authorization_response,
                code_verifier=code_verifier,
                state=state,
            )

        id_token = token.get("id_token")
        if not id_token:
            raise NetworkError("No ID token in token response")

        keys = JsonWebKey.import_key_set(await self._get_jwks(metadata["jwks_uri"]))
        claims = jwt.decode(
            id_token,
            keys,
            claims_options={
                "iss": {"essential": True, "value": metadata.get("issuer", self.issuer_url)},
                "aud": {"essential": True, "value": self.client_id},
            },
        )
        claims.validate()
        return dict(token), dict(claims)

    async def build_end_session_url(
        self, post_logout_redirect_uri: str, id_token_hint: Optional[str] = None
    ) -> str:
        """
        Build the provider logout redirect (or go straight back when unsupported).

        Args:
            post_logout_redirect_uri: Where the provider sends the browser afterwards
            id_token_hint: ID token from the ending session, when one is held
        """
        metadata = await self.get_provider_metadata()
        endpoint = metadata.get("end_session_endpoint")
        if not endpoint:
            return post_logout_redirect_uri

        params = [
            ("client_id", self._require_client_id()),
            ("post_logout_redirect_uri", post_logout_redirect_uri),
        ]
        if id_token_hint:
            params.append(("id_token_hint", id_token_hint))
        return add_params_to_uri(endpoint, params)
