"""Tests for the docview CLI commands.

The configured store is replaced by a wrapper around a prepared
InMemoryDocumentStore by patching docview.cli._common.create_store. The
wrapper records close() instead of closing, so tests can inspect the store
after the command ran.
"""

import io
import json
from unittest.mock import Mock, patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from docview.cli import app
from docview.errors import RemoteUnavailableError
from docview.store import DesignDocument, InMemoryDocumentStore, ViewDefinition

runner = CliRunner()

STATUS_MAP = "function (doc, meta) { emit(meta.id, null); }"


@pytest.fixture
def cli_store(clean_env):
    store = InMemoryDocumentStore()
    store.upsert_design_document(DesignDocument("USER", [
        ViewDefinition(name="findByStatus", map=STATUS_MAP),
    ]))
    store.insert("USER:1", '{"name": "Ada", "status": "ACTIVE"}')
    return store


@pytest.fixture
def cli_client(cli_store):
    """Store client handed to the commands."""
    client = Mock(wraps=cli_store)
    client.close = Mock()
    with patch("docview.cli._common.create_store", return_value=client):
        yield client


@pytest.fixture
def json_out(monkeypatch):
    """Capture the stdout console used for --json output."""
    buffer = io.StringIO()
    monkeypatch.setattr("docview.cli._console.stdout_console", Console(file=buffer))
    return buffer


@pytest.fixture
def errors(monkeypatch):
    """Record error lines printed by the store lifecycle helper."""
    recorder = Mock()
    monkeypatch.setattr("docview.cli._common.print_err", recorder)
    return recorder


class TestPing:
    """Tests for the ping command."""

    def test_ping_ok(self, cli_client):
        result = runner.invoke(app, ["ping"])
        assert result.exit_code == 0
        cli_client.close.assert_called_once_with()

    def test_ping_json(self, cli_client, json_out):
        result = runner.invoke(app, ["--json", "ping"])
        assert result.exit_code == 0
        assert json.loads(json_out.getvalue()) == {"ok": True, "design_documents": 1}

    def test_ping_unreachable(self, clean_env, errors):
        with patch(
            "docview.cli._common.create_store",
            side_effect=RemoteUnavailableError("connect", ConnectionError("refused")),
        ):
            result = runner.invoke(app, ["ping"])
        assert result.exit_code == 1
        assert "refused" in errors.call_args[0][0]

    def test_raw_connect_failure_exits_1(self, clean_env, errors):
        with patch("docview.cli._common.create_store", side_effect=OSError("no route")):
            result = runner.invoke(app, ["ping"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        assert "no route" in errors.call_args[0][0]

    def test_invalid_config_exits(self, clean_env):
        clean_env.setenv("DOCVIEW_BACKEND_TYPE", "couchbase")
        result = runner.invoke(app, ["ping"])
        assert result.exit_code == 1


class TestViewsCommands:
    """Tests for views list / views provision."""

    def test_list_json(self, cli_client, json_out):
        result = runner.invoke(app, ["--json", "views", "list"])
        assert result.exit_code == 0
        assert json.loads(json_out.getvalue()) == [
            {"design_document": "USER", "view": "findByStatus"},
        ]

    def test_list_table(self, cli_client):
        result = runner.invoke(app, ["views", "list"])
        assert result.exit_code == 0

    def test_list_missing_design_document(self, cli_client):
        result = runner.invoke(app, ["views", "list", "-d", "ORDER"])
        assert result.exit_code == 1

    def test_provision_creates_view(self, cli_store, cli_client, json_out):
        result = runner.invoke(
            app,
            ["--json", "views", "provision", "User", "findByCity", "--where", "doc.city",
             "--emit", "emit(doc.city, null)"],
        )
        assert result.exit_code == 0
        payload = json.loads(json_out.getvalue())
        assert payload["design_document"] == "USER"
        assert payload["view"] == "findByCity"
        assert payload["created"] is True
        assert payload["in_sync"] is True
        assert "emit(doc.city, null);" in payload["map"]

        names = [v.name for v in cli_store.get_design_document("USER").views]
        assert names == ["findByStatus", "findByCity"]

    def test_provision_existing_view_is_left_alone(self, cli_store, cli_client, json_out):
        result = runner.invoke(
            app,
            ["--json", "views", "provision", "User", "findByStatus", "--where", "doc.status"],
        )
        assert result.exit_code == 0
        payload = json.loads(json_out.getvalue())
        assert payload["created"] is False
        assert payload["in_sync"] is False
        assert payload["map"] == STATUS_MAP
        assert cli_store.get_design_document("USER").views[0].map == STATUS_MAP

    def test_provision_reports_drift(self, cli_client):
        with patch("docview.cli._console.print_warn") as warn:
            result = runner.invoke(
                app, ["views", "provision", "User", "findByStatus", "--where", "doc.status"]
            )
        assert result.exit_code == 0
        assert "differs" in warn.call_args[0][0]

    def test_provision_rejects_empty_predicate(self, cli_store, cli_client):
        result = runner.invoke(app, ["views", "provision", "User", "findX", "--where", " "])
        assert result.exit_code == 1
        assert len(cli_store.get_design_document("USER").views) == 1
        cli_client.close.assert_not_called()

    def test_catalog_failure_exits_1(self, cli_client, errors):
        cli_client.list_design_documents.side_effect = TimeoutError("view engine timeout")
        result = runner.invoke(app, ["views", "list"])
        assert result.exit_code == 1
        assert "view engine timeout" in errors.call_args[0][0]
        cli_client.close.assert_called_once_with()


class TestDocsCommands:
    """Tests for docs get."""

    def test_get_json(self, cli_client, json_out):
        result = runner.invoke(app, ["--json", "docs", "get", "User", "1"])
        assert result.exit_code == 0
        assert json.loads(json_out.getvalue()) == {"name": "Ada", "status": "ACTIVE"}

    def test_get_panel(self, cli_client):
        result = runner.invoke(app, ["docs", "get", "User", "1"])
        assert result.exit_code == 0

    def test_get_missing(self, cli_client):
        result = runner.invoke(app, ["docs", "get", "User", "404"])
        assert result.exit_code == 1
        cli_client.close.assert_called_once_with()

    def test_get_non_json_document(self, cli_store, cli_client):
        cli_store.insert("USER:raw", "not json")
        result = runner.invoke(app, ["docs", "get", "User", "raw"])
        assert result.exit_code == 1

    def test_get_driver_failure_exits_1(self, cli_client, errors):
        cli_client.get.side_effect = ConnectionError("down")
        result = runner.invoke(app, ["docs", "get", "User", "1"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, ConnectionError)
        assert "down" in errors.call_args[0][0]
        cli_client.close.assert_called_once_with()

    def test_get_empty_id_exits_1(self, cli_client):
        with patch("docview.cli.cmd_docs.print_err") as print_err:
            result = runner.invoke(app, ["docs", "get", "User", ""])
        assert result.exit_code == 1
        assert "non-empty" in print_err.call_args[0][0]
        cli_client.get.assert_not_called()
