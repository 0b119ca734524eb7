"""Tests for health check endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from sops_operator.health import ReadinessState, create_combined_wsgi_app, start_health_server


def _environ(path: str) -> dict:
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": path,
        "SCRIPT_NAME": "",
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "wsgi.url_scheme": "http",
    }


class TestCombinedWsgiApp:
    """Test cases for the combined metrics and health app."""

    def test_healthz(self):
        """Test /healthz endpoint."""
        app = create_combined_wsgi_app()
        start_response = MagicMock()

        body = b"".join(app(_environ("/healthz"), start_response))

        assert b'"status":"ok"' in body
        assert "200" in start_response.call_args[0][0]

    def test_readyz_without_tracker(self):
        """Test /readyz is ready when no tracker is given."""
        app = create_combined_wsgi_app()
        start_response = MagicMock()

        body = b"".join(app(_environ("/readyz"), start_response))

        assert b'"status":"ready"' in body

    def test_readyz_follows_tracker(self):
        """Test /readyz reports 503 until the operator is marked ready."""
        readiness = ReadinessState()
        app = create_combined_wsgi_app(readiness)

        start_response = MagicMock()
        body = b"".join(app(_environ("/readyz"), start_response))
        assert b'"status":"starting"' in body
        assert "503" in start_response.call_args[0][0]

        readiness.mark_ready()
        start_response = MagicMock()
        app(_environ("/readyz"), start_response)
        assert "200" in start_response.call_args[0][0]

    @patch("sops_operator.health.make_wsgi_app")
    def test_metrics_delegated(self, mock_make_wsgi_app):
        """Test that other paths go to the prometheus app."""
        metrics_app = MagicMock(return_value=[b"# metrics"])
        mock_make_wsgi_app.return_value = metrics_app
        app = create_combined_wsgi_app()
        environ = _environ("/metrics")
        start_response = MagicMock()

        assert app(environ, start_response) == [b"# metrics"]
        metrics_app.assert_called_once_with(environ, start_response)


class TestReadinessState:
    """Test cases for ReadinessState."""

    def test_transitions(self):
        """Test marking ready and not ready."""
        readiness = ReadinessState()
        assert not readiness.ready
        readiness.mark_ready()
        assert readiness.ready
        readiness.mark_not_ready()
        assert not readiness.ready


class TestStartHealthServer:
    """Test cases for start_health_server."""

    @patch("sops_operator.health.threading.Thread")
    @patch("sops_operator.health.make_server")
    def test_starts_daemon_thread(self, mock_make_server, mock_thread):
        """Test that the server runs in a daemon thread."""
        start_health_server(9999)

        assert mock_make_server.call_args[0][:2] == ("", 9999)
        mock_thread.assert_called_once_with(target=mock_make_server.return_value.serve_forever, daemon=True)
        mock_thread.return_value.start.assert_called_once()
