"""Build an authorised Google Drive API client."""

from __future__ import annotations

import logging
import os
from urllib.parse import parse_qs, urlparse

from .config import GoogleDriveConfig
from .errors import AuthError

LOGGER = logging.getLogger(__name__)

CONSOLE_OAUTH_ATTEMPTS = 3


def _extract_code_from_user_input(raw_value: str) -> str:
    """Return the OAuth authorization code from direct input or a pasted URL."""

    value = (raw_value or "").strip()
    if not value:
        raise ValueError("Missing authorization input")

    if value.lower().startswith(("http://", "https://")):
        parsed = urlparse(value)
        code_candidates = parse_qs(parsed.query).get("code") or []
        if code_candidates and code_candidates[0].strip():
            return code_candidates[0].strip()
        raise ValueError("Redirect URL did not include an authorization code")

    return value


def _complete_console_oauth_flow(flow, *, attempts: int = CONSOLE_OAUTH_ATTEMPTS):
    """Exchange an authorization code pasted on the console for user credentials.

    Input without a code and codes Google rejects count as failed attempts;
    once ``attempts`` are used up an ``AuthError`` is raised.
    """

    redirect_uris = flow.client_config.get("redirect_uris") or []
    if not flow.redirect_uri and redirect_uris:
        flow.redirect_uri = redirect_uris[0]

    consent_url, _ = flow.authorization_url(
        prompt="consent",
        access_type="offline",
        include_granted_scopes="true",
    )
    LOGGER.info("Grant Drive access by opening this URL in any browser:\n%s", consent_url)

    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        raw_value = input("Authorization code or redirected URL: ")
        try:
            flow.fetch_token(code=_extract_code_from_user_input(raw_value))
        except Exception as exc:
            last_error = exc
            LOGGER.error("Authorization attempt %d of %d failed: %s", attempt, attempts, exc)
            continue
        return flow.credentials
    raise AuthError("No usable authorization code was entered") from last_error


def _load_service_account_credentials(gd_config: GoogleDriveConfig):
    from google.oauth2 import service_account

    key_path = gd_config.service_account_key_file
    LOGGER.info("Authorizing with service account key %s", key_path)
    return service_account.Credentials.from_service_account_file(
        str(key_path), scopes=list(gd_config.scopes)
    )


def _load_oauth_credentials(
    gd_config: GoogleDriveConfig,
    *,
    force_console_oauth: bool = False,
    force_token_refresh: bool = False,
):
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials
    from google_auth_oauthlib.flow import InstalledAppFlow

    token_path = gd_config.oauth_token_file
    credentials = None
    if force_token_refresh and token_path.exists():
        try:
            token_path.unlink()
        except OSError:
            LOGGER.warning("Unable to remove existing token cache at %s", token_path)
    if token_path.exists():
        credentials = Credentials.from_authorized_user_file(
            str(token_path), list(gd_config.scopes)
        )

    if credentials and credentials.valid:
        return credentials

    if credentials and credentials.expired and credentials.refresh_token:
        LOGGER.info("Refreshing cached OAuth token %s", token_path)
        credentials.refresh(Request())
    else:
        flow = InstalledAppFlow.from_client_secrets_file(
            str(gd_config.oauth_client_secrets_file), list(gd_config.scopes)
        )
        open_browser = bool(
            os.environ.get("DISPLAY")
            or os.environ.get("WAYLAND_DISPLAY")
            or os.environ.get("BROWSER")
        )
        if force_console_oauth or not open_browser:
            LOGGER.info("Using console-based OAuth flow.")
            credentials = _complete_console_oauth_flow(flow)
        else:
            credentials = flow.run_local_server(port=0, open_browser=True)

    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(credentials.to_json(), encoding="utf-8")
    return credentials


def authenticate(
    gd_config: GoogleDriveConfig,
    *,
    force_console_oauth: bool = False,
    force_token_refresh: bool = False,
) -> "Resource":
    """Return a Drive v3 service, raising ``AuthError`` on any credential failure."""

    source = gd_config.credential_source
    if source is None or not source.exists():
        raise AuthError("Credential file not found", path=source)

    try:
        if gd_config.uses_service_account:
            credentials = _load_service_account_credentials(gd_config)
        else:
            credentials = _load_oauth_credentials(
                gd_config,
                force_console_oauth=force_console_oauth,
                force_token_refresh=force_token_refresh,
            )
        from googleapiclient.discovery import build

        return build("drive", "v3", credentials=credentials, cache_discovery=False)
    except AuthError:
        raise
    except Exception as exc:
        raise AuthError("Unable to authorize Google Drive access", path=source) from exc


__all__ = ["authenticate"]
