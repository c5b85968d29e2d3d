"""Tests for npm dependency provisioning."""

import pytest

from conftest import failing
from decryptex.core.installer import DependencyInstaller, InstallError


@pytest.fixture
def installer(fake_runner, logger, tmp_path):
    return DependencyInstaller(fake_runner, logger, project_dir=tmp_path)


class TestLocalPackages:
    """Tests for project-local packages."""

    def test_present_package_is_not_installed(self, installer, fake_runner):
        assert installer.ensure_local_package("obfuscation-detector") is False

        assert fake_runner.called_tools() == ["node"]
        assert fake_runner.calls[0][-1] == "obfuscation-detector"

    def test_missing_package_is_installed_in_project(self, installer, fake_runner, tmp_path):
        cwds = []
        fake_runner.fail("node")
        fake_runner.on("npm", lambda argv, **kwargs: cwds.append(kwargs.get("cwd")))

        assert installer.ensure_local_package("obfuscation-detector") is True

        assert fake_runner.calls[-1] == ["npm", "install", "obfuscation-detector"]
        assert cwds == [tmp_path]

    def test_install_failure_raises(self, installer, fake_runner):
        fake_runner.fail("node", "npm")

        with pytest.raises(InstallError, match="obfuscation-detector"):
            installer.ensure_local_package("obfuscation-detector")

    def test_auto_install_disabled_raises_without_installing(self, fake_runner, logger, tmp_path):
        fake_runner.fail("node")
        installer = DependencyInstaller(fake_runner, logger, project_dir=tmp_path, auto_install=False)

        with pytest.raises(InstallError, match="disabled"):
            installer.ensure_local_package("obfuscation-detector")
        assert "npm" not in fake_runner.called_tools()

    def test_result_is_cached(self, installer, fake_runner):
        installer.ensure_local_package("obfuscation-detector")
        installer.ensure_local_package("obfuscation-detector")

        assert len(fake_runner.calls) == 1


class TestGlobalPackages:
    """Tests for globally installed command-line tools."""

    def test_present_library_is_detected_with_npm_list(self, installer, fake_runner):
        assert installer.ensure_global_package("webcrack") is False
        assert fake_runner.calls == [["npm", "list", "-g", "webcrack"]]

    def test_missing_library_is_installed_globally(self, installer, fake_runner):
        def npm(argv, **kwargs):
            if argv[1] == "list":
                return failing(argv)
            return None

        fake_runner.on("npm", npm)

        assert installer.ensure_global_package("restringer") is True
        assert fake_runner.calls[-1] == ["npm", "install", "-g", "restringer"]


def test_provision_reports_present_and_installed(installer, fake_runner):
    def npm(argv, **kwargs):
        if argv[1] == "list" and argv[-1] == "webcrack":
            return failing(argv)
        return None

    fake_runner.on("npm", npm)

    report = installer.provision(["obfuscation-detector"], ["js-beautify", "webcrack"])

    assert report.present == ["obfuscation-detector", "js-beautify"]
    assert report.installed == ["webcrack"]


def test_provision_stops_on_first_failure(installer, fake_runner):
    fake_runner.fail("npm")

    with pytest.raises(InstallError):
        installer.provision([], ["js-beautify", "webcrack"])

    assert ["npm", "list", "-g", "webcrack"] not in fake_runner.calls
