"""
Unit tests for game server endpoint derivation.
"""

import pytest

from pokerdot.transport.endpoint import InvalidHostnameError, api_uri


class TestApiUri:
    @pytest.mark.parametrize(
        "hostname, expected",
        [
            ("localhost", "ws://localhost:7000/api"),
            ("192.168.1.5", "ws://192.168.1.5:7000/api"),
            ("127.0.0.1", "ws://127.0.0.1:7000/api"),
            ("foo.example.com", "wss://foo-api.example.com/"),
            ("poker.dot", "wss://poker-api.dot/"),
            ("play.cards.example.org", "wss://play-api.cards.example.org/"),
        ],
    )
    def test_derivation(self, hostname, expected):
        assert api_uri(hostname) == expected

    def test_hyphenated_subdomain_uses_first_word_split(self):
        # Only word characters form the subdomain, as in the web client
        assert api_uri("my-app.example.com") == "wss://app-api.example.com/"

    def test_host_without_dot_is_rejected(self):
        with pytest.raises(InvalidHostnameError):
            api_uri("intranet")

    def test_error_is_value_error(self):
        assert issubclass(InvalidHostnameError, ValueError)
