"""Preferences file loading and validation."""

from textwrap import dedent

import pytest
import yaml

from checkbook_config import get_active_config, load_preferences
from checkbook_config.schema import BatchPrintPreferences, CheckbookConfig, PrintMode
from checkbook_kernel.exceptions import InvalidPreferencesError


@pytest.fixture
def write_prefs(tmp_path):
    def _write(text: str):
        path = tmp_path / "preferences.yaml"
        path.write_text(dedent(text))
        return path

    return _write


class TestDefaults:

    def test_no_path_gives_defaults(self):
        config = get_active_config()
        assert config == CheckbookConfig()
        assert config.batch_print.mode == PrintMode.INTERACTIVE
        assert config.batch_print.auto_number is True

    def test_empty_file_gives_defaults(self, write_prefs):
        assert load_preferences(write_prefs("")) == CheckbookConfig()

    def test_missing_keys_fall_back(self, write_prefs):
        config = load_preferences(write_prefs("""
            batch_print:
              mode: pdf
              pdf_export_path: /tmp/checks
        """))
        assert config.batch_print.mode == PrintMode.PDF
        assert config.batch_print.pdf_export_path == "/tmp/checks"
        assert config.batch_print.spool_delay_seconds == BatchPrintPreferences().spool_delay_seconds
        assert config.database.url == "sqlite:///checkbook.db"


class TestFullFile:

    def test_all_values(self, write_prefs):
        config = load_preferences(write_prefs("""
            batch_print:
              mode: silent
              printer_device_name: "Office Laser"
              settle_delay_seconds: 0
              sheet_settle_delay_seconds: 1.5
              spool_delay_seconds: 3
              auto_number: false
            database:
              url: sqlite:///books.db
              echo: true
        """))
        prefs = config.batch_print
        assert prefs.mode == PrintMode.SILENT
        assert prefs.printer_device_name == "Office Laser"
        assert prefs.settle_delay_seconds == 0.0
        assert prefs.sheet_settle_delay_seconds == 1.5
        assert prefs.spool_delay_seconds == 3.0
        assert prefs.auto_number is False
        assert config.database.url == "sqlite:///books.db"
        assert config.database.echo is True

    def test_blank_printer_name_is_none(self, write_prefs):
        config = load_preferences(write_prefs("""
            batch_print:
              printer_device_name: "   "
        """))
        assert config.batch_print.printer_device_name is None

    def test_active_config_logs_source(self, write_prefs, captured_logs):
        path = write_prefs("batch_print: {mode: pdf, pdf_export_path: out}\n")
        get_active_config(path)
        loaded = [r for r in captured_logs() if r["message"] == "config_loaded"]
        assert loaded[0]["config_source"] == str(path)
        assert loaded[0]["print_mode"] == "pdf"


class TestInvalid:

    @pytest.mark.parametrize(
        "body, field",
        [
            ("batch_print: {mode: fax}", "batch_print.mode"),
            ("batch_print: {settle_delay_seconds: -1}", "batch_print.settle_delay_seconds"),
            ("batch_print: {spool_delay_seconds: soon}", "batch_print.spool_delay_seconds"),
            ("batch_print: {sheet_settle_delay_seconds: true}", "batch_print.sheet_settle_delay_seconds"),
            ("batch_print: {auto_number: 'yes please'}", "batch_print.auto_number"),
            ("batch_print: {printer_device_name: 12}", "batch_print.printer_device_name"),
            ("batch_print: [silent]", "batch_print"),
            ("database: {url: ''}", "database.url"),
            ("database: {echo: maybe}", "database.echo"),
            ("- just\n- a list\n", "<root>"),
        ],
    )
    def test_bad_values_name_the_field(self, write_prefs, body, field):
        with pytest.raises(InvalidPreferencesError) as exc_info:
            load_preferences(write_prefs(body))
        assert exc_info.value.field == field
        assert exc_info.value.code == "INVALID_PREFERENCES"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_preferences(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, write_prefs):
        with pytest.raises(yaml.YAMLError):
            load_preferences(write_prefs("batch_print: {mode: [\n"))
