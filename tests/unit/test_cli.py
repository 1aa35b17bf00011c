"""Tests for the CLI entry point (no network)."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from candidate_discovery.core.config import HOST_ENV_VAR, KEY_ENV_VAR
from candidate_discovery.core.errors import TimedOut
from candidate_discovery.core.schemas import DiscoveryResult, NormalizedCandidate
from main import build_request, main, parse_args


class TestParseArgs:
    def test_search_repeatable_options(self) -> None:
        args = parse_args([
            "search", "--keywords", "Data Scientist",
            "--title", "Data Scientist", "--title", "ML Engineer",
            "--location", "USA", "--limit", "10",
        ])
        assert args.command == "search"
        assert args.title_keywords == ["Data Scientist", "ML Engineer"]
        assert args.locations == ["USA"]
        assert args.limit == 10

    def test_keywords_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["search"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])

    def test_build_request_resolves_locations(self) -> None:
        args = parse_args(["search", "--keywords", "x", "--location", "Mumbai"])
        assert build_request(args).geo_codes == [106164952]


class TestMain:
    def test_locations(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["locations"])
        assert "Bangalore: 112376381" in capsys.readouterr().out

    def test_dry_run_needs_no_credentials(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.delenv(HOST_ENV_VAR, raising=False)
        monkeypatch.delenv(KEY_ENV_VAR, raising=False)
        main(["search", "--keywords", "React developer", "--dry-run"])
        out = capsys.readouterr().out
        assert "[DRY RUN]" in out
        assert '"keywords": "React developer"' in out

    def test_missing_credentials_fail_fast(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.delenv(HOST_ENV_VAR, raising=False)
        monkeypatch.delenv(KEY_ENV_VAR, raising=False)
        with patch("main.run", new_callable=AsyncMock) as run_mock:
            with pytest.raises(SystemExit) as exc_info:
                main(["search", "--keywords", "x"])
        assert exc_info.value.code == 2
        run_mock.assert_not_called()
        assert "RAPID_API_BASE" in capsys.readouterr().err

    def test_timeout_hint(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv(HOST_ENV_VAR, "h")
        monkeypatch.setenv(KEY_ENV_VAR, "k")
        with patch("main.run", new_callable=AsyncMock, side_effect=TimedOut(30)):
            with pytest.raises(SystemExit) as exc_info:
                main(["search", "--keywords", "x"])
        assert exc_info.value.code == 1
        assert "may just be slow" in capsys.readouterr().err

    def test_prints_payload(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv(HOST_ENV_VAR, "h")
        monkeypatch.setenv(KEY_ENV_VAR, "k")
        payload = json.dumps({"success": True, "data": []})
        with patch("main.run", new_callable=AsyncMock, return_value=payload):
            main(["search", "--keywords", "x"])
        assert json.loads(capsys.readouterr().out) == {"success": True, "data": []}

    def test_bad_config_path(self, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "--keywords", "x", "--config", str(tmp_path / "nope.yaml")])
        assert exc_info.value.code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_narrative_file_is_directory(
        self, capsys: pytest.CaptureFixture[str], tmp_path: Path,
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "--keywords", "x", "--narrative-file", str(tmp_path), "--dry-run"])
        assert exc_info.value.code == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_unwritable_output(
        self,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        monkeypatch.setenv(HOST_ENV_VAR, "h")
        monkeypatch.setenv(KEY_ENV_VAR, "k")
        candidate = NormalizedCandidate(public_id="ann", name="Ann", profile_url="https://x")
        result = DiscoveryResult(candidates=[candidate], total_count=1, total_fetched=1)
        with patch("main.discover_candidates", new_callable=AsyncMock, return_value=result):
            with pytest.raises(SystemExit) as exc_info:
                main(["search", "--keywords", "x", "--output", str(tmp_path)])
        assert exc_info.value.code == 1
        assert "could not write output" in capsys.readouterr().err

    def test_writes_output_file(
        self,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        monkeypatch.setenv(HOST_ENV_VAR, "h")
        monkeypatch.setenv(KEY_ENV_VAR, "k")
        candidate = NormalizedCandidate(public_id="ann", name="Ann", profile_url="https://x")
        result = DiscoveryResult(candidates=[candidate], total_count=1, total_fetched=1)
        out = tmp_path / "candidates.json"
        with patch("main.discover_candidates", new_callable=AsyncMock, return_value=result):
            main(["search", "--keywords", "x", "--output", str(out)])
        assert json.loads(out.read_text())[0]["public_id"] == "ann"
        assert json.loads(capsys.readouterr().out)["total_fetched"] == 1
