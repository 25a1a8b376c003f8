"""Unit tests for timesafer command-line argument parsing."""

import pytest

from timesafer.cli.parser import create_parser


class TestCreateParser:
    def test_parse_args_when_time_command_then_components_are_ints(self) -> None:
        args = create_parser().parse_args(["time", "2022", "3", "2", "15", "33", "40"])

        assert args.command == "time"
        assert (args.year, args.month, args.day) == (2022, 3, 2)
        assert (args.hour, args.minute, args.second, args.nanosecond) == (15, 33, 40, 0)

    def test_parse_args_when_nanosecond_given_then_parsed(self) -> None:
        args = create_parser().parse_args(["time", "2022", "3", "2", "15", "33", "40", "500"])

        assert args.nanosecond == 500

    def test_parse_args_when_negative_component_then_parsed(self) -> None:
        """Test out-of-range values reach validation instead of failing in argparse."""
        args = create_parser().parse_args(["date", "2022", "-1", "1"])

        assert args.month == -1

    def test_parse_args_when_global_options_then_set(self) -> None:
        args = create_parser().parse_args(
            ["--backend", "pytz", "--log-level", "debug", "--no-log-colors", "now", "--date"]
        )

        assert args.backend == "pytz"
        assert args.log_level == "DEBUG"
        assert args.no_log_colors is True
        assert args.date is True

    def test_parse_args_when_parse_time_assume_local_then_set(self) -> None:
        args = create_parser().parse_args(["parse-time", "2022-01-01T00:00:00", "--assume-local"])

        assert args.text == "2022-01-01T00:00:00"
        assert args.assume_local is True

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["time", "2022", "3"],
            ["date", "2022", "x", "1"],
            ["--backend", "dateutil", "now"],
            ["-v", "-q", "now"],
            ["unknown"],
        ],
    )
    def test_parse_args_when_invalid_usage_then_exits_with_2(self, argv: list) -> None:
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(argv)

        assert exc_info.value.code == 2

    def test_create_parser_when_prog_given_then_used(self) -> None:
        assert create_parser("cet").prog == "cet"
