"""Tests for request descriptors, credentials and results."""

import pytest

from sonarrapi.core.models import ApiResult, Credentials, RequestDescriptor
from sonarrapi.utils.exceptions import ErrorCategory, NetworkError, NotFoundError


class TestRequestDescriptor:
    def test_defaults(self):
        """Should default to GET with no query parameters or body."""
        descriptor = RequestDescriptor("/tag")

        assert descriptor.method == "GET"
        assert descriptor.query_params == {}
        assert descriptor.body is None

    def test_method_is_normalised(self):
        assert RequestDescriptor("/tag", method="post").method == "POST"

    def test_none_method_means_get(self):
        assert RequestDescriptor("/tag", method=None).method == "GET"

    def test_rejects_unknown_method(self):
        """Should only accept standard HTTP verbs."""
        with pytest.raises(ValueError, match="FETCH"):
            RequestDescriptor("/tag", method="FETCH")

    def test_path_gets_leading_slash(self):
        assert RequestDescriptor("series/1").path == "/series/1"

    def test_none_query_params_become_empty(self):
        assert RequestDescriptor("/tag", query_params=None).query_params == {}


class TestCredentials:
    def test_api_root_strips_trailing_slash(self):
        credentials = Credentials("http://sonarr.local/", "key")

        assert credentials.url_for("/tag") == "http://sonarr.local/api/v3/tag"

    def test_headers_carry_api_key(self):
        assert Credentials("http://sonarr.local", "key").headers == {"X-Api-Key": "key"}

    def test_repr_hides_api_key(self):
        assert "secret" not in repr(Credentials("http://sonarr.local", "secret"))


class TestApiResult:
    def test_success(self):
        result = ApiResult(data=[{"id": 1, "label": "a"}])

        assert result.ok
        assert result.category is None
        assert result.status_code is None

    def test_failure_exposes_error_identity(self):
        result = ApiResult(error=NotFoundError("missing"))

        assert not result.ok
        assert result.data is None
        assert result.category is ErrorCategory.API_ERROR
        assert result.status_code == 404

    def test_network_failure_has_no_status(self):
        result = ApiResult(error=NetworkError("down"))

        assert result.category is ErrorCategory.NETWORK_ERROR
        assert result.status_code is None
