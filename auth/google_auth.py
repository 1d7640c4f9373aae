# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Google OAuth - Refresh-token authentication for background syncs
"""
import os
import json
import requests
from datetime import datetime, timedelta
import logging
from typing import Dict, Optional

import config
from utils.timezone import get_local_time, format_local_time

logger = logging.getLogger(__name__)

TOKEN_URL = 'https://oauth2.googleapis.com/token'


class GoogleAuth:
    """Keeps a valid Google access token for the Calendar and Sheets APIs"""

    def __init__(self, client_id: Optional[str] = None, client_secret: Optional[str] = None,
                 token_file: Optional[str] = None):
        self.client_id = client_id or config.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or config.GOOGLE_CLIENT_SECRET
        self.token_file = token_file or config.TOKEN_CACHE_FILE
        self.token_expires_at: Optional[datetime] = None

        # Try to load tokens from persistent storage first
        self._load_tokens_from_disk()

        # Fall back to environment variables if disk storage is empty
        if not self.refresh_token:
            self.access_token = os.environ.get('GOOGLE_ACCESS_TOKEN')
            self.refresh_token = os.environ.get('GOOGLE_REFRESH_TOKEN')
            logger.info("Auth manager initialized (using environment tokens)")
        else:
            logger.info("Auth manager initialized (using persistent storage)")

    def _load_tokens_from_disk(self):
        """Load tokens from persistent disk storage"""
        self.access_token = None
        self.refresh_token = None
        if not self.token_file or not os.path.exists(self.token_file):
            logger.info("No persistent token cache found")
            return
        try:
            with open(self.token_file, 'r') as f:
                cached = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load tokens from disk: {e}")
            return

        self.access_token = cached.get('access_token')
        self.refresh_token = cached.get('refresh_token')
        expires_at = cached.get('expires_at')
        if expires_at:
            try:
                self.token_expires_at = datetime.fromisoformat(expires_at)
            except ValueError:
                self.token_expires_at = None
        logger.info("✅ Loaded tokens from persistent storage")

    def _save_tokens_to_disk(self):
        """Save tokens to persistent disk storage"""
        if not self.token_file:
            return
        token_data = {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_at': self.token_expires_at.isoformat() if self.token_expires_at else None
        }
        try:
            with open(self.token_file, 'w') as f:
                json.dump(token_data, f)
            logger.info("✅ Tokens saved to persistent storage")
        except OSError as e:
            logger.error(f"Failed to save tokens to disk: {e}")

    def is_authenticated(self) -> bool:
        return bool(self.refresh_token or self.access_token)

    def _is_token_expired(self) -> bool:
        if not self.token_expires_at:
            # Unknown expiry: trust the token until the API answers 401
            return False
        return get_local_time() >= self.token_expires_at - timedelta(minutes=5)

    def ensure_valid_token(self) -> bool:
        """Ensure we have a valid access token"""
        if not self.access_token or self._is_token_expired():
            if not self.refresh_token:
                logger.warning("No refresh token available")
                return bool(self.access_token)
            return self.refresh_access_token()
        return True

    def get_headers(self) -> Optional[Dict[str, str]]:
        """Get authorization headers for API calls"""
        if not self.ensure_valid_token():
            logger.error("Cannot get headers - no valid token")
            return None

        return {
            'Authorization': f'Bearer {self.access_token}',
            'Content-Type': 'application/json'
        }

    def refresh_access_token(self) -> bool:
        """Refresh the access token using refresh token"""
        if not self.refresh_token:
            logger.warning("No refresh token available")
            return False

        logger.info(f"Refreshing access token at {format_local_time(get_local_time())}...")
        data = {
            'client_id': self.client_id,
            'client_secret': self.client_secret,
            'refresh_token': self.refresh_token,
            'grant_type': 'refresh_token'
        }

        try:
            response = requests.post(TOKEN_URL, data=data, timeout=30)
        except requests.exceptions.RequestException as e:
            logger.error(f"Token refresh exception: {e}")
            return False

        if response.status_code != 200:
            logger.error(f"Token refresh failed: {response.status_code} - {response.text}")
            return False

        tokens = response.json()
        self.access_token = tokens.get('access_token')
        # Google only returns a refresh token when it rotates it
        self.refresh_token = tokens.get('refresh_token', self.refresh_token)
        expires_in = tokens.get('expires_in', 3600)
        self.token_expires_at = get_local_time() + timedelta(seconds=expires_in)
        self._save_tokens_to_disk()

        logger.info(f"Token refreshed successfully. Expires: {format_local_time(self.token_expires_at)}")
        return True
