# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Calendar Reader - Handles all read operations against the Google Calendar API
"""
import logging
import urllib.parse
import requests
from datetime import datetime
from typing import Dict, List, Optional

from sync.errors import ConfigurationError, ProviderFetchError
from utils.timezone import to_rfc3339

logger = logging.getLogger(__name__)

CALENDAR_API = 'https://www.googleapis.com/calendar/v3'


def calendar_url(calendar_id: str, *parts: str) -> str:
    path = '/'.join(urllib.parse.quote(p, safe='') for p in (calendar_id,) + parts)
    return f"{CALENDAR_API}/calendars/{path}"


class CalendarReader:
    """Handles reading calendar data from Google Calendar"""

    def __init__(self, auth_manager):
        self.auth = auth_manager

    def _get(self, url: str, params: Optional[Dict] = None) -> requests.Response:
        headers = self.auth.get_headers()
        if not headers:
            raise ProviderFetchError("No valid authentication headers")

        try:
            response = requests.get(url, headers=headers, params=params, timeout=30)

            if response.status_code == 401:
                # Try refreshing token
                if not self.auth.refresh_access_token():
                    raise ProviderFetchError("Authentication failed", status_code=401)
                headers = self.auth.get_headers()
                response = requests.get(url, headers=headers, params=params, timeout=30)

        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout while calling {url}")
            raise ProviderFetchError(f"Timeout: {e}") from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error while calling {url}")
            raise ProviderFetchError(f"Connection error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ProviderFetchError(str(e)) from e

        return response

    def get_calendar(self, calendar_id: str) -> Dict:
        """Get calendar metadata; a missing calendar is a configuration problem"""
        response = self._get(calendar_url(calendar_id))

        if response.status_code == 200:
            calendar = response.json()
            logger.info(f"Found calendar '{calendar.get('summary', calendar_id)}'")
            return calendar
        if response.status_code == 404:
            raise ConfigurationError(f"Calendar '{calendar_id}' not found")

        logger.error(f"Failed to get calendar: {response.status_code}")
        logger.error(f"Response: {response.text}")
        raise ProviderFetchError(f"Failed to get calendar {calendar_id}", status_code=response.status_code)

    def get_calendar_events(self, calendar_id: str, start: datetime, end: datetime,
                            query: Optional[str] = None) -> List[Dict]:
        """Get all single events overlapping [start, end], following pagination"""
        url = calendar_url(calendar_id, 'events')
        params = {
            'timeMin': to_rfc3339(start),
            'timeMax': to_rfc3339(end),
            'singleEvents': 'true',
            'orderBy': 'startTime',
            'showDeleted': 'false',
            'maxResults': 2500
        }
        if query:
            params['q'] = query

        all_events = []
        page_counter = 0
        max_pages = 50  # Safety guard to avoid infinite pagination loops

        while page_counter < max_pages:
            response = self._get(url, params)

            if response.status_code != 200:
                logger.error(f"Failed to get events: {response.status_code}")
                logger.error(f"Response: {response.text}")
                raise ProviderFetchError("Failed to list calendar events", status_code=response.status_code)

            data = response.json()
            all_events.extend(data.get('items', []))
            page_counter += 1

            # Check for next page
            page_token = data.get('nextPageToken')
            if not page_token:
                break
            params = dict(params, pageToken=page_token)
            logger.info(f"Fetching next page of events (current total: {len(all_events)})")
        else:
            # Returning a partial listing would turn unseen events into creations
            raise ProviderFetchError(f"Event listing exceeded {max_pages} pages")

        logger.info(f"Retrieved total of {len(all_events)} events from calendar {calendar_id}")
        return all_events
