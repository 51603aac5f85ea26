"""Tests for clang_ci.pipeline (dispatch and the composite `all` action)."""

from unittest.mock import MagicMock, patch

from clang_ci import pipeline
from clang_ci.actions import Action


def _proc(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


def _argvs(m: MagicMock) -> list[list[str]]:
    return [c.args[0] for c in m.call_args_list]


def _recording_steps(order: list[str], failing: str | None = None, status: int = 1):
    def make(name: str) -> MagicMock:
        def step(config, host) -> int:
            order.append(name)
            return status if name == failing else 0

        return MagicMock(side_effect=step)

    return {name: make(name) for name in ("deps", "llvm", "binutils", "kernel")}


def _patched(steps):
    return (
        patch.object(pipeline.deps, "run", steps["deps"]),
        patch.object(pipeline, "run_llvm", steps["llvm"]),
        patch.object(pipeline, "run_binutils", steps["binutils"]),
        patch.object(pipeline, "run_kernel", steps["kernel"]),
    )


class TestRunAll:
    def test_order_on_x86_64(self, make_config, debian_x86) -> None:
        order: list[str] = []
        steps = _recording_steps(order)
        p1, p2, p3, p4 = _patched(steps)
        with p1, p2, p3, p4:
            assert pipeline.run_all(make_config(), debian_x86) == 0
        assert order == ["deps", "llvm", "binutils", "kernel"]

    def test_kernel_skipped_on_other_arch(self, make_config, debian_arm) -> None:
        order: list[str] = []
        steps = _recording_steps(order)
        p1, p2, p3, p4 = _patched(steps)
        with p1, p2, p3, p4:
            assert pipeline.run_all(make_config(), debian_arm) == 0
        assert order == ["deps", "llvm", "binutils"]

    def test_fail_fast(self, make_config, debian_x86) -> None:
        order: list[str] = []
        steps = _recording_steps(order, failing="llvm", status=2)
        p1, p2, p3, p4 = _patched(steps)
        with p1, p2, p3, p4:
            assert pipeline.run_all(make_config(), debian_x86) == 2
        assert order == ["deps", "llvm"]


class TestDispatch:
    def test_every_action_has_a_handler(self) -> None:
        assert set(pipeline.HANDLERS) == set(Action)

    def test_dispatch_calls_handler(self, make_config, debian_x86) -> None:
        handler = MagicMock(return_value=7)
        cfg = make_config()
        with patch.dict(pipeline.HANDLERS, {Action.COMPRESS: handler}):
            assert pipeline.dispatch(Action.COMPRESS, cfg, debian_x86) == 7
        handler.assert_called_once_with(cfg, debian_x86)


class TestDefaultScenario:
    def test_local_x86_64_run_issues_expected_commands(self, make_config, debian_x86) -> None:
        """No action, x86_64, not automated: no deps; LLVM X86 + binutils x86_64; kernel built."""
        cfg = make_config()
        with patch("clang_ci.commands.subprocess.run", return_value=_proc(0)) as m_run:
            assert pipeline.dispatch(Action.ALL, cfg, debian_x86) == 0
        calls = _argvs(m_run)
        assert not any(a[0] in ("apt", "dnf") for a in calls)
        llvm = calls[0]
        assert llvm[0].endswith("build-llvm.py")
        i = llvm.index("--targets")
        assert llvm[i + 1 : i + 4] == ["AArch64", "ARM", "X86"]
        binutils = calls[1]
        assert binutils[0].endswith("build-binutils.py")
        assert binutils[-3:] == ["aarch64", "arm", "x86_64"]
        assert calls[2][:2] == ["git", "clone"]
        assert calls[3][1:3] == ["-m", "clang_ci.build.kernel_driver"]
