"""Pushed Authorization Request response model (RFC 9126)."""

from __future__ import annotations

from urllib.parse import urlencode, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict

from pkce_oidc.models.errors import ProtocolError


class ParResponse(BaseModel):
    """Response from a PAR endpoint. Unknown members pass through."""

    model_config = ConfigDict(extra="allow")

    request_uri: str | None = None
    expires_in: int | None = None
    error: str | None = None
    error_description: str | None = None

    def is_success(self) -> bool:
        return self.error is None and self.request_uri is not None

    def build_authorization_url(self, authorization_endpoint: str, client_id: str) -> str:
        """Build the front-channel URL that references the pushed request.

        RFC 9126 Section 4: only ``client_id`` and ``request_uri`` are sent.

        Raises:
            ProtocolError: If the response carries an error or no ``request_uri``
        """
        if not self.is_success():
            raise ProtocolError("Cannot build authorization URL from a failed PAR response")

        parts = urlsplit(authorization_endpoint)
        query = urlencode({"client_id": client_id, "request_uri": self.request_uri})
        return urlunsplit(parts._replace(query=query))
