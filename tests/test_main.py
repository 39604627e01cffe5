import unittest
from pathlib import Path
from unittest.mock import patch

from device_report.core.exceptions import BatchTimeoutError, DataSourceConnectionError, QueryError
from device_report.main import load_settings, main, parse_args
from device_report.reporting.report import ReportResult


class TestMain(unittest.TestCase):
    """Test cases for the command line entry point"""

    def setUp(self):
        patcher = patch('device_report.main.configure_logging')
        self.mock_logging = patcher.start()
        self.addCleanup(patcher.stop)

    def test_overrides_applied(self):
        args = parse_args(["--filter", "Station%", "--days", "3", "--output-dir", "out", "--timeout-ms", "500"])
        settings = load_settings(args)

        self.assertEqual(settings.device_name_pattern, "Station%")
        self.assertEqual(settings.window_days, 3)
        self.assertEqual(settings.output_dir, "out")
        self.assertEqual(settings.batch_timeout_ms, 500)

    @patch('device_report.main.generate_report')
    def test_success_exit_code(self, mock_generate):
        mock_generate.return_value = ReportResult(path=Path("data/report.tsv"), rows=[])

        self.assertEqual(main(["--no-mail"]), 0)
        self.assertFalse(mock_generate.call_args.kwargs["send_mail"])

    @patch('device_report.main.generate_report')
    def test_mail_failure_still_succeeds(self, mock_generate):
        mock_generate.return_value = ReportResult(path=Path("data/report.tsv"), rows=[], mail_error="refused")

        self.assertEqual(main([]), 0)

    @patch('device_report.main.generate_report')
    def test_fatal_errors_exit_non_zero(self, mock_generate):
        for error in (
            DataSourceConnectionError("down"),
            QueryError("lost", udid="WS-1"),
            BatchTimeoutError(60000),
        ):
            mock_generate.side_effect = error
            self.assertEqual(main([]), 1)

    def test_invalid_configuration(self):
        self.assertEqual(main(["--days", "0"]), 1)


if __name__ == '__main__':
    unittest.main()
