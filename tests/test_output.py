"""Tests for the console output formatter."""

from dirmirror.output import OutputFormatter


class TestOutputFormatter:
    """Tests for OutputFormatter."""

    def test_info_printed(self, capsys):
        OutputFormatter().info("Syncing: /a -> /b")
        assert "Syncing: /a -> /b" in capsys.readouterr().out

    def test_quiet_suppresses_info(self, capsys):
        out = OutputFormatter(quiet=True)
        out.info("hidden")
        out.success("hidden")
        assert capsys.readouterr().out == ""

    def test_error_printed_in_quiet_mode(self, capsys):
        OutputFormatter(quiet=True).error("boom")
        assert "Error: boom" in capsys.readouterr().err

    def test_brackets_are_not_markup(self, capsys):
        """OS error messages like '[Errno 28]' print verbatim."""
        OutputFormatter().error("[Errno 28] No space left on device")
        assert "[Errno 28] No space left on device" in capsys.readouterr().err

    def test_summary_table(self, capsys):
        OutputFormatter().print_summary(
            "Sync summary", {"copied": 2, "skipped": 0, "bytes_copied": 2048}
        )
        text = capsys.readouterr().out
        assert "copied" in text
        assert "2.0 KB" in text
        assert "skipped" not in text

    def test_output_json(self, capsys):
        OutputFormatter(json_output=True).output_json([{"copied": 1}])
        assert '"copied": 1' in capsys.readouterr().out
