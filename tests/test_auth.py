"""
Google OAuth token handling tests
"""

import pytest
import json
from unittest.mock import MagicMock, patch
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from auth import GoogleAuth
from auth.google_auth import TOKEN_URL


@pytest.fixture
def token_file(tmp_path):
    return str(tmp_path / 'token_cache.json')


class TestGoogleAuth:

    @pytest.mark.unit
    def test_tokens_from_environment(self, monkeypatch, token_file):
        monkeypatch.setenv('GOOGLE_ACCESS_TOKEN', 'access-1')
        monkeypatch.setenv('GOOGLE_REFRESH_TOKEN', 'refresh-1')

        auth = GoogleAuth('client', 'secret', token_file)

        assert auth.is_authenticated()
        assert auth.get_headers()['Authorization'] == 'Bearer access-1'

    @pytest.mark.unit
    def test_tokens_from_cache_file(self, monkeypatch, token_file):
        monkeypatch.delenv('GOOGLE_REFRESH_TOKEN', raising=False)
        with open(token_file, 'w') as f:
            json.dump({'access_token': 'cached', 'refresh_token': 'refresh-2', 'expires_at': None}, f)

        auth = GoogleAuth('client', 'secret', token_file)

        assert auth.refresh_token == 'refresh-2'
        assert auth.get_headers()['Authorization'] == 'Bearer cached'

    @pytest.mark.unit
    @patch('auth.google_auth.requests.post')
    def test_refresh_saves_new_token(self, mock_post, monkeypatch, token_file):
        monkeypatch.delenv('GOOGLE_ACCESS_TOKEN', raising=False)
        monkeypatch.setenv('GOOGLE_REFRESH_TOKEN', 'refresh-1')
        mock_post.return_value = MagicMock(status_code=200)
        mock_post.return_value.json.return_value = {'access_token': 'access-2', 'expires_in': 3600}

        auth = GoogleAuth('client', 'secret', token_file)
        headers = auth.get_headers()

        assert headers['Authorization'] == 'Bearer access-2'
        assert mock_post.call_args.args[0] == TOKEN_URL
        assert mock_post.call_args.kwargs['data']['grant_type'] == 'refresh_token'
        with open(token_file) as f:
            saved = json.load(f)
        assert saved['access_token'] == 'access-2'
        assert saved['refresh_token'] == 'refresh-1'

    @pytest.mark.unit
    @patch('auth.google_auth.requests.post')
    def test_failed_refresh_gives_no_headers(self, mock_post, monkeypatch, token_file):
        monkeypatch.delenv('GOOGLE_ACCESS_TOKEN', raising=False)
        monkeypatch.setenv('GOOGLE_REFRESH_TOKEN', 'refresh-1')
        mock_post.return_value = MagicMock(status_code=400, text='invalid_grant')

        assert GoogleAuth('client', 'secret', token_file).get_headers() is None

    @pytest.mark.unit
    def test_no_tokens(self, monkeypatch, token_file):
        monkeypatch.delenv('GOOGLE_ACCESS_TOKEN', raising=False)
        monkeypatch.delenv('GOOGLE_REFRESH_TOKEN', raising=False)

        auth = GoogleAuth('client', 'secret', token_file)

        assert not auth.is_authenticated()
        assert auth.get_headers() is None
