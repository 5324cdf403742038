"""Tests for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from docnav.cli import app, _setup_logging
from docnav.web.app import app as web_app


runner = CliRunner()


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("docnav.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("docnav.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.INFO


class TestSearchCommand:
    """Tests for the search command."""

    def test_search_corpus_not_found(self, tmp_path: Path) -> None:
        """Fails when the corpus file doesn't exist."""
        result = runner.invoke(app, ["search", "cardiac", "--corpus", str(tmp_path / "missing.json")])
        assert result.exit_code != 0

    def test_search_no_results(self, corpus_file: Path) -> None:
        """Shows message when no results found."""
        result = runner.invoke(app, ["search", "xqzjv", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "No matches found" in result.stdout

    def test_search_with_results(self, corpus_file: Path) -> None:
        """Displays scored results in a table."""
        result = runner.invoke(app, ["search", "Airway Management", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "2-2" in result.stdout

    def test_search_category_filter(self, corpus_file: Path) -> None:
        """Only documents carrying every requested category are shown."""
        result = runner.invoke(app, ["search", "Cardiac Arrest", "-c", "trauma", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "7-21" in result.stdout
        assert "1-1" not in result.stdout

    def test_search_verbose(self, corpus_file: Path) -> None:
        """Verbose flag is accepted."""
        result = runner.invoke(app, ["search", "CPR", "--corpus", str(corpus_file), "-v"])
        assert result.exit_code == 0


class TestListCommand:
    """Tests for the list command."""

    def test_list_all(self, corpus_file: Path) -> None:
        """Every document is listed."""
        result = runner.invoke(app, ["list", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        for doc_id in ("1-1", "2-2", "3-1", "7-21", "9-9"):
            assert doc_id in result.stdout

    def test_list_by_category(self, corpus_file: Path) -> None:
        """Category filter narrows the listing."""
        result = runner.invoke(app, ["list", "-c", "pediatric", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "3-1" in result.stdout
        assert "2-2" not in result.stdout

    def test_list_no_match(self, corpus_file: Path) -> None:
        """Shows message when no document has the categories."""
        result = runner.invoke(app, ["list", "-c", "pediatric", "-c", "trauma", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "No documents match" in result.stdout


class TestShowCommand:
    """Tests for the show command."""

    def test_show_document(self, corpus_file: Path) -> None:
        """Prints the body and the referenced ids."""
        result = runner.invoke(app, ["show", "1-1", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "Cardiac Arrest" in result.stdout
        assert "References: 3-1, 2-2, 7-21" in result.stdout

    def test_show_title_matcher_only(self, corpus_file: Path) -> None:
        """Numeric references disappear without the numeric matcher."""
        result = runner.invoke(app, ["show", "1-1", "-m", "title", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "References: 3-1, 2-2" in result.stdout
        assert "7-21" not in result.stdout

    def test_show_unknown_document(self, corpus_file: Path) -> None:
        """Unknown ids exit with an error."""
        result = runner.invoke(app, ["show", "nope", "--corpus", str(corpus_file)])
        assert result.exit_code == 1
        assert "Document not found" in result.stdout

    def test_show_unknown_matcher(self, corpus_file: Path) -> None:
        """Unknown matcher names are rejected."""
        result = runner.invoke(app, ["show", "1-1", "-m", "regex", "--corpus", str(corpus_file)])
        assert result.exit_code != 0


class TestRefsCommand:
    """Tests for the refs command."""

    def test_refs_single_document(self, corpus_file: Path) -> None:
        """Lists references of one document."""
        result = runner.invoke(app, ["refs", "7-21", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "1-1" in result.stdout

    def test_refs_whole_corpus(self, corpus_file: Path) -> None:
        """Scans every document with a worker pool."""
        result = runner.invoke(app, ["refs", "--workers", "2", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        for doc_id in ("1-1", "2-2", "3-1", "7-21", "9-9"):
            assert doc_id in result.stdout

    def test_refs_unknown_document(self, corpus_file: Path) -> None:
        """Unknown ids exit with an error."""
        result = runner.invoke(app, ["refs", "nope", "--corpus", str(corpus_file)])
        assert result.exit_code == 1


class TestCategoriesCommand:
    """Tests for the categories command."""

    def test_categories(self, corpus_file: Path) -> None:
        """Tags are printed with their labels."""
        result = runner.invoke(app, ["categories", "--corpus", str(corpus_file)])
        assert result.exit_code == 0
        assert "Adult" in result.stdout
        assert "Pediatric" in result.stdout
        assert "Trauma" in result.stdout


class TestWebCommand:
    """Tests for the web command."""

    def test_web_starts_server(self, corpus_file: Path) -> None:
        """Starts uvicorn server with correct parameters."""
        try:
            with patch("uvicorn.run") as mock_uvicorn_run:
                result = runner.invoke(
                    app, ["web", "--host", "0.0.0.0", "--port", "9000", "--corpus", str(corpus_file)]
                )
                assert result.exit_code == 0
                mock_uvicorn_run.assert_called_once()
                call_kwargs = mock_uvicorn_run.call_args[1]
                assert call_kwargs["host"] == "0.0.0.0"
                assert call_kwargs["port"] == 9000
                assert web_app.state.corpus_path == corpus_file
        finally:
            web_app.state.corpus_path = None

    def test_web_warns_missing_corpus(self, tmp_path: Path) -> None:
        """Shows warning when the corpus doesn't exist."""
        try:
            with patch("uvicorn.run"):
                result = runner.invoke(app, ["web", "--corpus", str(tmp_path / "missing.json")])
                assert result.exit_code == 0
                assert "corpus not found" in result.stdout.lower()
        finally:
            web_app.state.corpus_path = None
