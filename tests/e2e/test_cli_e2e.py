from __future__ import annotations

"""
End-to-end tests for the CLI controller.

Drives main() with real argument parsing, settings resolution and
selection logic, replacing only the HTTP layer (requests.get/post).
"""

import json
from unittest.mock import patch

import pytest

from contexter_client.interface.cli.app import main

SERVER = ["--server-url", "http://contexter.test", "--api-key", "k"]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the CLI away from the real settings file and environment."""
    for var in ("CONTEXTER_SERVER_URL", "CONTEXTER_API_KEY", "CONTEXTER_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    path = tmp_path / "config.json"
    with patch("contexter_client.domain.config.CONFIG_FILE", str(path)):
        yield path


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("contexter_client.interface.cli.app.configure_logging"):
        yield


@pytest.fixture
def metadata_response(make_response, sample_paths):
    return make_response(json_data={"name": "demo", "path": "/srv/demo", "files": sample_paths})


def test_projects_command(make_response, capsys):
    """TC-01: 'projects' prints one line per project."""
    resp = make_response(json_data={"projects": [{"name": "demo", "path": "/srv/demo"}]})

    with patch("requests.get", return_value=resp):
        code = main(SERVER + ["projects"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "demo\t/srv/demo"


def test_tree_command_shows_states(metadata_response, capsys):
    """TC-02: 'tree' renders tri-state markers after toggles."""
    with patch("requests.get", return_value=metadata_response):
        code = main(SERVER + ["tree", "demo", "--exclude", "a/x.txt"])

    out = capsys.readouterr().out
    assert code == 0
    assert "[~] a/" in out
    assert "[ ] x.txt" in out
    assert "2/3 file(s) selected" in out


def test_fetch_all_sends_empty_paths(metadata_response, make_response, capsys):
    """TC-03: Fetching with nothing deselected posts an empty path list."""
    content = make_response(json_data={"content": "ALL CONTENT"})

    with patch("requests.get", return_value=metadata_response), \
            patch("requests.post", return_value=content) as mock_post:
        code = main(SERVER + ["fetch", "demo"])

    assert code == 0
    assert mock_post.call_args.kwargs["json"] == {"paths": []}
    assert capsys.readouterr().out == "ALL CONTENT\n"


def test_fetch_subset_to_file_as_json(metadata_response, make_response, tmp_path):
    """TC-04: Deselecting a file sends the rest and writes a JSON document."""
    content = make_response(json_data={"content": "partial"})
    out_file = tmp_path / "out" / "context.json"

    with patch("requests.get", return_value=metadata_response), \
            patch("requests.post", return_value=content) as mock_post:
        code = main(SERVER + ["fetch", "demo", "--exclude", "a/x.txt", "--json", "-o", str(out_file)])

    assert code == 0
    assert mock_post.call_args.kwargs["json"] == {"paths": ["a/y.txt", "b.txt"]}
    doc = json.loads(out_file.read_text(encoding="utf-8"))
    assert doc == {"project": "demo", "paths": ["a/y.txt", "b.txt"], "content": "partial"}


def test_fetch_include_only(metadata_response, make_response):
    """TC-05: --include starts from an empty selection."""
    content = make_response(json_data={"content": "b"})

    with patch("requests.get", return_value=metadata_response), \
            patch("requests.post", return_value=content) as mock_post:
        assert main(SERVER + ["fetch", "demo", "--include", "b.txt"]) == 0

    assert mock_post.call_args.kwargs["json"] == {"paths": ["b.txt"]}


def test_fetch_server_error_exit_code(metadata_response, make_response, capsys):
    """TC-06: A failing content fetch exits with 1 and reports the cause."""
    failure = make_response(status_code=500, json_data={"error": "Failed to gather files"})

    with patch("requests.get", return_value=metadata_response), \
            patch("requests.post", return_value=failure):
        code = main(SERVER + ["fetch", "demo"])

    assert code == 1
    assert "Failed to gather files" in capsys.readouterr().err


def test_unknown_node_exit_code(metadata_response, capsys):
    """TC-07: Toggling a node that does not exist is a usage error."""
    with patch("requests.get", return_value=metadata_response):
        code = main(SERVER + ["tree", "demo", "--exclude", "nope.txt"])

    assert code == 2
    assert "nope.txt" in capsys.readouterr().err


def test_missing_configuration_exit_code(capsys):
    """TC-08: Without a server URL or key nothing is requested."""
    with patch("requests.get") as mock_get:
        code = main(["projects"])

    assert code == 2
    assert "Missing" in capsys.readouterr().err
    mock_get.assert_not_called()


def test_project_not_found_exit_code(make_response, capsys):
    """TC-09: A 404 on metadata reports the unknown project."""
    with patch("requests.get", return_value=make_response(status_code=404)):
        code = main(SERVER + ["fetch", "ghost"])

    assert code == 1
    assert "ghost" in capsys.readouterr().err


def test_validate_command(make_response, capsys):
    """TC-10: 'validate' reports valid and invalid keys."""
    with patch("requests.get", return_value=make_response(json_data={"projects": []})):
        assert main(SERVER + ["validate"]) == 0
    assert "valid" in capsys.readouterr().out

    with patch("requests.get", return_value=make_response(status_code=401)):
        assert main(SERVER + ["validate"]) == 1


def test_configure_persists_settings(isolated_config, make_response):
    """TC-11: 'configure' saves settings used by later commands."""
    assert main(SERVER + ["configure"]) == 0
    saved = json.loads(isolated_config.read_text(encoding="utf-8"))
    assert saved["server_url"] == "http://contexter.test"
    assert saved["api_key"] == "k"

    resp = make_response(json_data={"projects": []})
    with patch("requests.get", return_value=resp) as mock_get:
        assert main(["projects"]) == 0
    assert mock_get.call_args.kwargs["headers"]["X-API-Key"] == "k"


def test_configure_without_changes(capsys):
    """TC-12: 'configure' with no flags is a usage error."""
    assert main(["configure"]) == 2


def test_configure_flags_after_subcommand(isolated_config):
    """TC-13: Connection flags may follow the 'configure' sub-command."""
    assert main(["configure", "--api-key", "k", "--server-url", "http://h"]) == 0

    saved = json.loads(isolated_config.read_text(encoding="utf-8"))
    assert saved["server_url"] == "http://h"
    assert saved["api_key"] == "k"


def test_exclude_file_name_with_comma(make_response):
    """TC-14: A file whose name contains a comma is addressed as one node."""
    listing = make_response(json_data={"name": "demo", "path": "/srv/demo",
                                       "files": ["notes,v2.txt", "notes", "v2.txt"]})
    content = make_response(json_data={"content": "rest"})

    with patch("requests.get", return_value=listing), \
            patch("requests.post", return_value=content) as mock_post:
        assert main(SERVER + ["fetch", "demo", "--exclude", "notes,v2.txt"]) == 0

    assert mock_post.call_args.kwargs["json"] == {"paths": ["notes", "v2.txt"]}
