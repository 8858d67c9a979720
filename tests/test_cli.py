"""Tests for CLI commands."""

from pathlib import Path

from cairn.cli.app import app

NOTE = "Had coffee with Sarah Chen and David Kim, discussed AI infrastructure."


def _invoke(cli_runner, config_file: Path, *args: str):
    return cli_runner.invoke(app, [*args, "--config", str(config_file)])


class TestInitDb:
    def test_creates_database(self, cli_runner, config_file, tmp_path):
        result = _invoke(cli_runner, config_file, "init-db")
        assert result.exit_code == 0
        assert "Database ready" in result.stdout
        assert (tmp_path / "cli.db").exists()

    def test_missing_config(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            app, ["init-db", "--config", str(tmp_path / "missing.toml")]
        )
        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestIngestCommands:
    """Tests for 'cairn preview' and 'cairn ingest'."""

    def test_preview_saves_nothing(self, cli_runner, config_file):
        result = _invoke(cli_runner, config_file, "preview", NOTE)
        assert result.exit_code == 0
        assert "Sarah Chen" in result.stdout
        assert "new" in result.stdout

        people = _invoke(cli_runner, config_file, "people")
        assert "No people found" in people.stdout

    def test_ingest_creates_people(self, cli_runner, config_file):
        result = _invoke(cli_runner, config_file, "ingest", NOTE, "--date", "2024-01-05")
        assert result.exit_code == 0
        assert "Saved meeting #1" in result.stdout
        assert "created: Sarah Chen" in result.stdout
        assert "created: David Kim" in result.stdout
        assert "1 relationship(s) updated" in result.stdout

    def test_second_ingest_links(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE)
        result = _invoke(cli_runner, config_file, "ingest", NOTE)
        assert result.exit_code == 0
        assert "linked: Sarah Chen (#1)" in result.stdout

    def test_owner_mentions_are_skipped(self, cli_runner, config_file):
        result = _invoke(
            cli_runner, config_file, "ingest", "Lunch with Jordan Avery and Ann Lee."
        )
        assert result.exit_code == 0
        assert "Skipped owner mentions: Jordan Avery" in result.stdout
        assert "created: Jordan" not in result.stdout


class TestLookupCommands:
    """Tests for search, people, stale and profile."""

    def test_people_and_search(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE)

        people = _invoke(cli_runner, config_file, "people", "sarah")
        assert people.exit_code == 0
        assert "Sarah" in people.stdout
        assert "David" not in people.stdout

        search = _invoke(cli_runner, config_file, "search", "infrastructure")
        assert search.exit_code == 0
        assert "meeting" in search.stdout

    def test_search_no_results(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "init-db")
        result = _invoke(cli_runner, config_file, "search", "pottery")
        assert result.exit_code == 0
        assert "No results" in result.stdout

    def test_stale(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE, "--date", "2020-01-01")
        result = _invoke(cli_runner, config_file, "stale", "--days", "30")
        assert result.exit_code == 0
        assert "Stale contacts" in result.stdout
        assert "Sarah" in result.stdout

    def test_stale_none(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE)
        result = _invoke(cli_runner, config_file, "stale")
        assert "Everyone was seen" in result.stdout

    def test_profile(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE)
        result = _invoke(cli_runner, config_file, "profile", "1")
        assert result.exit_code == 0
        assert "Profile updated for Sarah Chen" in result.stdout

    def test_profile_missing(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "init-db")
        result = _invoke(cli_runner, config_file, "profile", "42")
        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestMeetingCommands:
    """Tests for meetings, correct-date and stats."""

    def test_meetings_lists_people(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE, "--date", "2024-01-05")
        result = _invoke(cli_runner, config_file, "meetings")
        assert result.exit_code == 0
        assert "2024-01-05" in result.stdout
        assert "Sarah" in result.stdout

    def test_meetings_empty(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "init-db")
        result = _invoke(cli_runner, config_file, "meetings")
        assert "No meetings found" in result.stdout

    def test_ingest_rejects_bad_date(self, cli_runner, config_file):
        result = _invoke(cli_runner, config_file, "ingest", NOTE, "--date", "blorp")
        assert result.exit_code == 1
        assert "Could not parse date" in result.stdout

    def test_correct_date(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE, "--date", "2024-01-05")
        result = _invoke(cli_runner, config_file, "correct-date", "1", "2024-02-10")
        assert result.exit_code == 0
        assert "moved to 2024-02-10" in result.stdout

    def test_correct_date_missing_meeting(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "init-db")
        result = _invoke(cli_runner, config_file, "correct-date", "9", "2024-02-10")
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_stats(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE)
        result = _invoke(cli_runner, config_file, "stats")
        assert result.exit_code == 0
        assert "Contacts" in result.stdout
        assert "Relationships" in result.stdout

    def test_ask_person(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE, "--date", "2024-01-05")
        result = _invoke(
            cli_runner, config_file, "ask", "when did I last talk to Sarah?"
        )
        assert result.exit_code == 0
        assert "person_lookup" in result.stdout
        assert "Sarah Chen" in result.stdout
        assert "Last met on 2024-01-05" in result.stdout

    def test_ask_count(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", NOTE)
        result = _invoke(cli_runner, config_file, "ask", "how many contacts do I have")
        assert result.exit_code == 0
        assert "You have 2 contacts." in result.stdout


class TestBracketedText:
    """Square brackets in notes and queries are printed, not parsed."""

    BRACKET_NOTE = (
        "Had coffee with Sarah Chen about the [/draft] budget and hiring plans."
    )

    def test_preview(self, cli_runner, config_file):
        result = _invoke(cli_runner, config_file, "preview", self.BRACKET_NOTE)
        assert result.exit_code == 0
        assert "[/draft]" in result.stdout
        assert "Sarah Chen" in result.stdout

    def test_ingest_and_list(self, cli_runner, config_file):
        result = _invoke(cli_runner, config_file, "ingest", self.BRACKET_NOTE)
        assert result.exit_code == 0
        assert "created: Sarah Chen" in result.stdout

        meetings = _invoke(cli_runner, config_file, "meetings")
        assert meetings.exit_code == 0

    def test_search_query(self, cli_runner, config_file):
        _invoke(cli_runner, config_file, "ingest", self.BRACKET_NOTE)
        result = _invoke(cli_runner, config_file, "search", "[bold]budget[/oops]")
        assert result.exit_code == 0
