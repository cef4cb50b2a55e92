"""
Tests for the command entry point.
"""

import pytest

from runtimepin import __main__ as entry
from runtimepin.runtime_dependency_config import InstallOutcome
from runtimepin.runtimepin_config import RuntimePinConfig
from runtimepin.runtimepin_exceptions import ConfigurationError, InstallInterrupted, IntegrityMismatch
from runtimepin.runtimes.nodejs import create_installer
from runtimepin_test_utils import FakeSession


class FakeInstaller:
    def __init__(self, result):
        self.result = result
        self.trust_anchors = []

    def ensure_installed(self, trust_anchor=None):
        self.trust_anchors.append(trust_anchor)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@pytest.fixture
def use_installer(monkeypatch):
    def _use(result):
        fake = FakeInstaller(result)
        monkeypatch.setattr(entry, "create_installer", lambda config, logger: fake)
        return fake

    return _use


class TestRun:
    def test_successful_install_exits_zero(self, use_installer, config, logger, capsys):
        use_installer(InstallOutcome(pinned_version="16.14.0", changed=True))

        assert entry.run(config, logger) == 0
        assert "installed node v16.14.0" in capsys.readouterr().out

    def test_already_installed_exits_zero(self, use_installer, config, logger, capsys):
        use_installer(InstallOutcome(pinned_version="16.14.0", changed=False))

        assert entry.run(config, logger) == 0
        assert "already installed" in capsys.readouterr().out

    def test_fatal_error_exits_non_zero_with_cause(self, use_installer, config, logger, capsys):
        use_installer(IntegrityMismatch("node.tar.xz", "a" * 64, "b" * 64))

        assert entry.run(config, logger) == entry.EXIT_FAILURE
        err = capsys.readouterr().err
        assert "IntegrityMismatch" in err
        assert "node.tar.xz" in err

    def test_interruption_exits_130(self, use_installer, config, logger, capsys):
        use_installer(InstallInterrupted("Interrupted by signal SIGTERM"))

        assert entry.run(config, logger) == entry.EXIT_INTERRUPTED
        assert "SIGTERM" in capsys.readouterr().err

    def test_configured_trust_anchor_is_passed(self, use_installer, tmp_path, logger):
        fake = use_installer(InstallOutcome(pinned_version="16.14.0", changed=False))
        config = RuntimePinConfig(install_root=tmp_path / "nodejs", trust_anchor=tmp_path / "ca.pem")

        entry.run(config, logger)

        assert fake.trust_anchors == [tmp_path / "ca.pem"]

    def test_invalid_artifact_table_exits_2(self, monkeypatch, config, logger):
        def broken(config, logger):
            raise ConfigurationError("Invalid artifact table")

        monkeypatch.setattr(entry, "create_installer", broken)

        assert entry.run(config, logger) == entry.EXIT_CONFIGURATION

    def test_unusable_workspace_parent_exits_non_zero_with_cause(self, monkeypatch, tmp_path, logger, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        config = RuntimePinConfig(
            install_root=tmp_path / "lib" / "nodejs",
            bin_dir=tmp_path / "bin",
            legacy_dir="",
            workspace_parent=blocker / "ws",
        )
        session = FakeSession()
        monkeypatch.setattr(
            entry,
            "create_installer",
            lambda config, logger: create_installer(config, logger, architecture_key="x86_64", session=session),
        )

        assert entry.run(config, logger) == entry.EXIT_FAILURE
        err = capsys.readouterr().err
        assert "WorkspaceUnavailable" in err
        assert str(blocker) in err
        assert session.calls == []


class TestMain:
    def test_invalid_configuration_exits_2(self, tmp_path, capsys):
        path = tmp_path / "runtimepin.toml"
        path.write_text("[runtimepin]\nmax_attempts = 0\n")

        assert entry.main({"RUNTIMEPIN_CONFIG": str(path)}) == entry.EXIT_CONFIGURATION
        assert "max_attempts" in capsys.readouterr().err
