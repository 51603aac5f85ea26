"""Tests for clang_ci.actions and the CLI's usage exit status."""

from unittest.mock import patch

import pytest

from clang_ci.actions import EXIT_USAGE, Action, UnknownActionError, parse_action


class TestParseAction:
    def test_no_arguments_defaults_to_all(self) -> None:
        assert parse_action([]) is Action.ALL

    @pytest.mark.parametrize(
        "token", ["all", "binutils", "deps", "kernel", "llvm", "compress", "release"]
    )
    def test_every_action_name_is_accepted(self, token: str) -> None:
        assert parse_action([token]).value == token

    def test_unknown_token_raises(self) -> None:
        with pytest.raises(UnknownActionError) as exc_info:
            parse_action(["publish"])
        assert exc_info.value.token == "publish"
        assert "unknown action" in str(exc_info.value)

    def test_case_sensitive(self) -> None:
        with pytest.raises(UnknownActionError):
            parse_action(["ALL"])

    def test_unknown_after_valid_still_rejected(self) -> None:
        with pytest.raises(UnknownActionError) as exc_info:
            parse_action(["llvm", "--verbose"])
        assert exc_info.value.token == "--verbose"

    def test_two_actions_rejected(self) -> None:
        with pytest.raises(UnknownActionError) as exc_info:
            parse_action(["llvm", "binutils"])
        assert "only one action" in str(exc_info.value)


class TestCliUsage:
    def test_unknown_action_exits_33_without_side_effects(self) -> None:
        from clang_ci.cli.main import run

        with (
            patch("subprocess.run") as m_run,
            patch("clang_ci.cli.main.Config.from_env") as m_cfg,
            patch("clang_ci.cli.main.dispatch") as m_dispatch,
        ):
            rc = run(["frobnicate"])
        assert rc == EXIT_USAGE == 33
        m_run.assert_not_called()
        m_cfg.assert_not_called()
        m_dispatch.assert_not_called()

    def test_main_exits_with_run_status(self) -> None:
        from clang_ci.cli.main import main

        with (
            patch("sys.argv", ["clang-ci", "nope"]),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()
        assert exc_info.value.code == 33
