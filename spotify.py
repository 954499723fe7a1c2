"""
Spotify Web API calls used to turn a vibe into a playlist.

Authorization uses the PKCE code flow. Every call takes the access token
explicitly; nothing is cached between calls.
"""

import base64
import hashlib
import logging
import secrets
import string
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import requests

log = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API = "https://api.spotify.com/v1"

SCOPES = [
    "user-read-private",
    "playlist-modify-public",
    "playlist-modify-private",
    "user-top-read",
]

DEFAULT_MARKET = "US"
SEARCH_LIMIT = 3  # Tracks requested per query
MAX_TRACKS = 12
SEARCH_DELAY = 0.15  # Seconds between queries
REQUEST_TIMEOUT = 15
PLAYLIST_DESCRIPTION = "Created by Vibe Analyzer App"
ADD_TRACKS_BATCH = 100  # API maximum per request

VERIFIER_ALPHABET = string.ascii_letters + string.digits


# =============================================================================
# Errors
# =============================================================================

class SpotifyError(Exception):
    """A failed Spotify call."""

    def __init__(self, message: str, status: Optional[int] = None, details=None):
        super().__init__(message)
        self.status = status
        self.details = details


class UnauthorizedError(SpotifyError):
    """Token missing, expired or revoked (401)."""


class RateLimitedError(SpotifyError):
    """Too many requests (429)."""

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class NotFoundError(SpotifyError):
    """Resource does not exist (404)."""


class TransientNetworkError(SpotifyError):
    """Connection failure, timeout or 5xx."""


def _error_details(response: requests.Response):
    try:
        return response.json()
    except ValueError:
        return response.text


def _check(response: requests.Response, action: str) -> requests.Response:
    """Raise the matching SpotifyError for a non-2xx response."""
    status = response.status_code
    if status < 400:
        return response

    details = _error_details(response)
    message = f"{action} failed with HTTP {status}"

    if status == 401:
        raise UnauthorizedError(message, status=status, details=details)
    if status == 429:
        retry_after = response.headers.get("Retry-After")
        raise RateLimitedError(
            message,
            retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            status=status,
            details=details,
        )
    if status == 404:
        raise NotFoundError(message, status=status, details=details)
    if status >= 500:
        raise TransientNetworkError(message, status=status, details=details)
    raise SpotifyError(message, status=status, details=details)


def _request(method: str, url: str, action: str, **kwargs) -> requests.Response:
    kwargs.setdefault("timeout", REQUEST_TIMEOUT)
    try:
        response = requests.request(method, url, **kwargs)
    except (requests.ConnectionError, requests.Timeout) as e:
        raise TransientNetworkError(f"{action} failed: {e}") from e
    return _check(response, action)


def _bearer_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Authorization (PKCE)
# =============================================================================

def generate_code_verifier(length: int = 128) -> str:
    """Random PKCE verifier; Spotify accepts 43-128 characters."""
    if not 43 <= length <= 128:
        raise ValueError(f"Verifier length must be 43-128, got {length}")
    return ''.join(secrets.choice(VERIFIER_ALPHABET) for _ in range(length))


def code_challenge(verifier: str) -> str:
    """S256 challenge: base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def build_authorize_url(client_id: str, redirect_uri: str, challenge: str,
                        scopes: Optional[list] = None) -> str:
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": " ".join(SCOPES if scopes is None else scopes),
        "code_challenge_method": "S256",
        "code_challenge": challenge,
        "show_dialog": "true",
    }
    return f"{SPOTIFY_AUTHORIZE_URL}?{urlencode(params)}"


@dataclass
class AccessToken:
    """Token returned by the code exchange."""
    access_token: str
    expires_at: float  # Unix time
    refresh_token: Optional[str] = None
    scope: str = ""

    @classmethod
    def from_response(cls, payload: dict, now: Optional[float] = None) -> "AccessToken":
        now = time.time() if now is None else now
        return cls(
            access_token=payload["access_token"],
            expires_at=now + int(payload.get("expires_in", 3600)),
            refresh_token=payload.get("refresh_token"),
            scope=payload.get("scope", ""),
        )

    def expired(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return now >= self.expires_at


def exchange_token(code: str, code_verifier: str, redirect_uri: str, client_id: str) -> AccessToken:
    """
    Exchange an authorization code for an access token.

    Raises:
        ValueError: If any argument is empty
        SpotifyError: If Spotify rejects the exchange
    """
    missing = [name for name, value in (("code", code), ("code_verifier", code_verifier),
                                        ("redirect_uri", redirect_uri), ("client_id", client_id))
               if not value]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")

    data = {
        "client_id": client_id,
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
        "code_verifier": code_verifier,
    }
    response = _request(
        "POST", SPOTIFY_TOKEN_URL, "Token exchange",
        data=data,
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    log.info("Token exchange successful")
    return AccessToken.from_response(response.json())


# =============================================================================
# Search
# =============================================================================

def search_tracks(access_token: str, queries: list, limit: int = SEARCH_LIMIT,
                  market: str = DEFAULT_MARKET, max_tracks: int = MAX_TRACKS,
                  delay: float = SEARCH_DELAY) -> list[dict]:
    """
    Run each query in order and collect unique tracks.

    A query that fails as not-found or transient is logged and skipped.
    Unauthorized and rate-limited failures end the search and propagate,
    since later queries would fail the same way.

    Returns:
        Track objects (as returned by Spotify) that have an id and a uri,
        de-duplicated by id, at most max_tracks long.

    Raises:
        SpotifyError: The last failure, if no query succeeded
    """
    tracks = []
    seen = set()
    answered = 0
    last_error = None

    for i, query in enumerate(queries):
        log.info("Searching (%d/%d): %r", i + 1, len(queries), query)
        try:
            response = _request(
                "GET", f"{SPOTIFY_API}/search", "Search",
                headers=_bearer_headers(access_token),
                params={"q": query, "type": "track", "limit": limit, "market": market},
            )
        except (NotFoundError, TransientNetworkError) as e:
            log.warning("Search failed for %r: %s", query, e)
            last_error = e
            continue

        answered += 1
        items = (response.json().get("tracks") or {}).get("items") or []
        for track in items:
            if track and track.get("id") and track.get("uri") and track["id"] not in seen:
                seen.add(track["id"])
                tracks.append(track)

        if len(tracks) >= max_tracks:
            break
        if delay and i < len(queries) - 1:
            time.sleep(delay)

    if not answered and last_error is not None:
        raise last_error

    log.info("Found %d unique tracks", len(tracks))
    return tracks[:max_tracks]


def describe_track(track: dict) -> str:
    """'Name - Artist, Artist' for display."""
    artists = ", ".join(a.get("name", "") for a in track.get("artists") or [])
    return f"{track.get('name', '?')} - {artists}" if artists else track.get("name", "?")


# =============================================================================
# Playlists
# =============================================================================

@dataclass
class Playlist:
    id: str
    url: str


def playlist_name_for(vibe: str) -> str:
    return f"My {vibe} Vibe"


def current_user_id(access_token: str) -> str:
    response = _request("GET", f"{SPOTIFY_API}/me", "Get user", headers=_bearer_headers(access_token))
    return response.json()["id"]


def create_playlist(access_token: str, name: str, track_uris: list,
                    description: str = PLAYLIST_DESCRIPTION, public: bool = False) -> Playlist:
    """
    Create a playlist for the current user and add the tracks to it.

    Raises:
        ValueError: If name or track_uris is empty
        SpotifyError: If any of the three calls fails
    """
    if not name or not track_uris:
        raise ValueError("A playlist needs a name and at least one track")

    headers = _bearer_headers(access_token)

    user_id = current_user_id(access_token)
    log.info("Creating playlist %r for user %s", name, user_id)

    response = _request(
        "POST", f"{SPOTIFY_API}/users/{user_id}/playlists", "Create playlist",
        headers=headers,
        json={"name": name, "description": description, "public": public},
    )
    payload = response.json()
    url = (payload.get("external_urls") or {}).get("spotify")
    if not payload.get("id") or not url:
        raise SpotifyError("Create playlist returned no id or URL", details=payload)
    playlist = Playlist(id=payload["id"], url=url)

    log.info("Adding %d tracks to playlist %s", len(track_uris), playlist.id)
    track_uris = list(track_uris)
    for start in range(0, len(track_uris), ADD_TRACKS_BATCH):
        _request(
            "POST", f"{SPOTIFY_API}/playlists/{playlist.id}/tracks", "Add tracks",
            headers=headers,
            json={"uris": track_uris[start:start + ADD_TRACKS_BATCH]},
        )

    return playlist
