# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Calendar Writer - Handles all write operations against the Google Calendar API
"""
import logging
import requests
from typing import Dict, Optional

from cal_ops.reader import calendar_url
from sync.errors import ProviderMutationError

logger = logging.getLogger(__name__)

# Mirrored events should not email attendees
NO_NOTIFICATIONS = {'sendUpdates': 'none'}


class CalendarWriter:
    """Handles writing calendar data to Google Calendar"""

    def __init__(self, auth_manager):
        self.auth = auth_manager

    def _send(self, method: str, url: str, json: Optional[Dict] = None) -> requests.Response:
        headers = self.auth.get_headers()
        if not headers:
            raise ProviderMutationError("No valid authentication headers")

        try:
            response = requests.request(method, url, headers=headers, params=NO_NOTIFICATIONS,
                                        json=json, timeout=30)

            if response.status_code == 401:
                # Try refreshing token
                if not self.auth.refresh_access_token():
                    raise ProviderMutationError("Authentication failed", status_code=401)
                headers = self.auth.get_headers()
                response = requests.request(method, url, headers=headers, params=NO_NOTIFICATIONS,
                                            json=json, timeout=30)

        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout during {method} {url}")
            raise ProviderMutationError(f"Timeout: {e}") from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error during {method} {url}")
            raise ProviderMutationError(f"Connection error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ProviderMutationError(str(e)) from e

        return response

    @staticmethod
    def _decode(response: requests.Response, what: str) -> Dict:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"❌ Unreadable response after {what}: {response.text[:200]}")
            raise ProviderMutationError(f"Unreadable response after {what}", status_code=response.status_code) from e

    def create_event(self, calendar_id: str, event_data: Dict) -> Dict:
        """Create a new event and return the stored resource"""
        response = self._send('POST', calendar_url(calendar_id, 'events'), event_data)

        if response.status_code in [200, 201]:
            logger.info(f"✅ Created event: {event_data.get('summary')}")
            return self._decode(response, f"creating '{event_data.get('summary')}'")

        logger.error(f"❌ Failed to create event: {response.status_code}")
        logger.error(f"Response: {response.text}")
        raise ProviderMutationError(f"Failed to create event '{event_data.get('summary')}'",
                                    status_code=response.status_code)

    def patch_event(self, calendar_id: str, event_id: str, changes: Dict) -> Dict:
        """Patch selected fields of an existing event"""
        response = self._send('PATCH', calendar_url(calendar_id, 'events', event_id), changes)

        if response.status_code == 200:
            logger.info(f"✅ Updated event ID {event_id[:8]}...: {sorted(changes)}")
            return self._decode(response, f"updating event {event_id}")

        logger.error(f"❌ Failed to update event: {response.status_code}")
        logger.error(f"Response: {response.text}")
        raise ProviderMutationError(f"Failed to update event {event_id}", status_code=response.status_code)

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        """Delete an event from the calendar"""
        response = self._send('DELETE', calendar_url(calendar_id, 'events', event_id))

        if response.status_code in [200, 204]:
            logger.info(f"✅ Deleted event ID: {event_id[:8]}...")
            return
        if response.status_code in [404, 410]:
            # Already gone counts as deleted
            logger.warning(f"Event not found for deletion: {event_id[:8]}...")
            return

        logger.error(f"❌ Failed to delete event: {response.status_code}")
        logger.error(f"Response: {response.text}")
        raise ProviderMutationError(f"Failed to delete event {event_id}", status_code=response.status_code)
