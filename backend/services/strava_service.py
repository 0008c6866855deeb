"""
Strava activity service.

Thin client for the Strava REST API: OAuth token exchange and refresh,
recent activities, and the telemetry streams foil analysis needs.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests

from config.settings import StravaConfig
from core.constants import REQUIRED_STREAMS

logger = logging.getLogger(__name__)


class StravaError(Exception):
    """Raised when a Strava API call fails."""
    pass


@dataclass
class StravaToken:
    """OAuth token set returned by Strava."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[float] = None  # Unix timestamp
    athlete: Optional[Dict[str, Any]] = None

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and time.time() >= self.expires_at

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> 'StravaToken':
        if not data.get('access_token'):
            raise StravaError("Failed to exchange token: no access_token in response")

        expires_at = data.get('expires_at')
        if expires_at is None and data.get('expires_in') is not None:
            expires_at = time.time() + float(data['expires_in'])

        return cls(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token'),
            expires_at=expires_at,
            athlete=data.get('athlete'),
        )


class StravaClient:
    """
    Client for the Strava API.

    An expired token is refreshed before each request when a refresh token
    is available.
    """

    def __init__(self,
                 token: Optional[StravaToken] = None,
                 client_id: str = StravaConfig.CLIENT_ID,
                 client_secret: str = StravaConfig.CLIENT_SECRET,
                 api_url: str = StravaConfig.API_URL,
                 oauth_url: str = StravaConfig.OAUTH_URL,
                 timeout: float = StravaConfig.REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.token = token
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_url = api_url.rstrip('/')
        self.oauth_url = oauth_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # OAuth
    # ------------------------------------------------------------------

    def authorization_url(self, redirect_uri: str, scope: str = StravaConfig.SCOPE) -> str:
        """URL the user visits to grant access."""
        query = urlencode({
            'client_id': self.client_id,
            'response_type': 'code',
            'redirect_uri': redirect_uri,
            'approval_prompt': 'force',
            'scope': scope,
        })
        return f"{self.oauth_url}/authorize?{query}"

    def exchange_code(self, code: str) -> StravaToken:
        """Exchange an authorization code for a token set."""
        self.token = self._request_token({'code': code, 'grant_type': 'authorization_code'})
        logger.info("Exchanged Strava authorization code for access token")
        return self.token

    def refresh(self, refresh_token: Optional[str] = None) -> StravaToken:
        """Refresh the access token."""
        refresh_token = refresh_token or (self.token.refresh_token if self.token else None)
        if not refresh_token:
            raise StravaError("No refresh token available")

        self.token = self._request_token({'refresh_token': refresh_token, 'grant_type': 'refresh_token'})
        logger.info("Refreshed Strava access token")
        return self.token

    def _request_token(self, payload: Dict[str, Any]) -> StravaToken:
        body = {'client_id': self.client_id, 'client_secret': self.client_secret, **payload}
        try:
            response = self.session.post(f"{self.oauth_url}/token", json=body, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise StravaError(f"Token request failed: {e}") from e
        return StravaToken.from_response(response.json())

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if self.token is None:
            raise StravaError("Not authenticated with Strava")

        if self.token.is_expired and self.token.refresh_token:
            self.refresh()

        url = f"{self.api_url}{path}"
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(
                url,
                headers={'Authorization': f"Bearer {self.token.access_token}"},
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise StravaError(f"Strava request to {path} failed: {e}") from e
        return response.json()

    def get_activities(self, per_page: int = StravaConfig.ACTIVITIES_PER_PAGE) -> List[Dict[str, Any]]:
        """Most recent activities of the authenticated athlete."""
        activities = self._get('/athlete/activities', params={'per_page': per_page})
        logger.info(f"Fetched {len(activities)} Strava activities")
        return activities

    def get_activity(self, activity_id: int) -> Dict[str, Any]:
        """Detailed activity, including max_speed and distance."""
        return self._get(f"/activities/{activity_id}")

    def get_activity_streams(self, activity_id: int) -> Dict[str, Any]:
        """
        Telemetry streams for one activity in keyed-object shape.

        Returns:
            Dict keyed by stream type, e.g. {'time': {'data': [...]}, ...}
        """
        return self._get(
            f"/activities/{activity_id}/streams",
            params={'keys': ','.join(REQUIRED_STREAMS), 'key_by_type': 'true'},
        )
