"""Tests for clang_ci.package.rpm."""

from unittest.mock import MagicMock, patch

from clang_ci.package import rpm


def _proc(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


def _argvs(m: MagicMock) -> list[list[str]]:
    return [c.args[0] for c in m.call_args_list]


def _spec(**overrides) -> rpm.RpmSpec:
    values = {
        "vendor": "acme",
        "version": "18.1.8",
        "revision": "abc1234",
        "arch": "x86_64",
        "distro": "fedora40",
        "source": "clang-18.1.8.tar.gz",
        "date": "Sun Oct 18 2026",
    }
    values.update(overrides)
    return rpm.RpmSpec(**values)


class TestRenderSpec:
    def test_header_fields(self) -> None:
        text = _spec().render()
        assert "Name:           clang-acme\n" in text
        assert "Version:        18\n" in text
        assert "Release:        abc1234%{?dist}\n" in text
        assert "Source0:        clang-18.1.8.tar.gz\n" in text
        assert "BuildArch:      x86_64\n" in text
        assert "AutoReqProv:    no\n" in text
        assert "Provides:       clang llvm lld polly openmp compiler-rt binutils\n" in text

    def test_disables_debuginfo_and_build_ids(self) -> None:
        text = _spec().render()
        assert "%define debug_package %{nil}" in text
        assert "%define _missing_build_ids_terminate_build 0" in text

    def test_install_section(self) -> None:
        text = _spec().render()
        assert "cp -r * %{buildroot}/usr/" in text
        assert "sed -i '1s|#!.*python|#!/usr/bin/python3|'" in text
        assert "chmod -x %{buildroot}/usr/share/opt-viewer/style.css" in text
        assert "chmod -x %{buildroot}/usr/share/opt-viewer/optpmap.py" in text
        assert "%files\n/usr/*\n" in text

    def test_changelog(self) -> None:
        assert "* Sun Oct 18 2026 acme - 18-abc1234\n- Automated build\n" in _spec().render()

    def test_changelog_date_format(self) -> None:
        date = rpm.changelog_date(0)
        assert len(date.split()) == 4
        assert date.split()[-1] in ("1969", "1970")


class TestBuildRpm:
    def test_builds_and_moves_rpm_to_dist(self, make_config) -> None:
        cfg = make_config()
        cfg.install_dir.mkdir()
        built = cfg.rpmbuild_dir / "RPMS" / "x86_64" / "clang-acme-18-abc1234.fc40.x86_64.rpm"

        def run(argv, **kwargs):
            if argv[0] == "rpmbuild":
                built.parent.mkdir(parents=True, exist_ok=True)
                built.write_bytes(b"rpm")
            return _proc(0)

        with patch("clang_ci.commands.subprocess.run", side_effect=run) as m_run:
            rc, rpms = rpm.build_rpm(cfg, _spec())
        assert rc == 0
        assert rpms == [cfg.dist_dir / built.name]
        assert (cfg.dist_dir / built.name).read_bytes() == b"rpm"
        assert not built.exists()
        for sub in rpm.RPMBUILD_SUBDIRS:
            assert (cfg.rpmbuild_dir / sub).is_dir()
        tar_argv, rpmbuild_argv = _argvs(m_run)
        tarball = cfg.rpmbuild_dir / "SOURCES" / "clang-18.1.8.tar.gz"
        assert tar_argv[:3] == ["tar", "-czf", str(tarball)]
        spec_path = cfg.rpmbuild_dir / "SPECS" / "clang.spec"
        assert rpmbuild_argv == [
            "rpmbuild",
            "-bb",
            str(spec_path),
            "--define",
            f"_topdir {cfg.rpmbuild_dir}",
        ]
        assert "Name:           clang-acme" in spec_path.read_text()

    def test_rpmbuild_failure_propagates(self, make_config) -> None:
        cfg = make_config()

        def run(argv, **kwargs):
            return _proc(1 if argv[0] == "rpmbuild" else 0)

        with patch("clang_ci.commands.subprocess.run", side_effect=run):
            rc, rpms = rpm.build_rpm(cfg, _spec())
        assert rc == 1
        assert rpms == []

    def test_no_output_is_an_error(self, make_config) -> None:
        with patch("clang_ci.commands.subprocess.run", return_value=_proc(0)):
            rc, rpms = rpm.build_rpm(make_config(), _spec())
        assert rc == 1
        assert rpms == []


def test_source_tarball_name() -> None:
    assert rpm.source_tarball_name("18.1.8") == "clang-18.1.8.tar.gz"
