"""
Tests for platform detection
"""
import pytest

from workstation.errors import UnsupportedPlatformError
from workstation.platform import detector as detector_module
from workstation.platform.detector import OSType, PackageManager, PlatformDetector


@pytest.fixture
def fake_system(monkeypatch, tmp_path):
    """Pretend to be a given OS with a given set of executables on PATH"""
    marker = tmp_path / 'osrelease'
    marker.write_text('6.5.0-generic\n')

    def _configure(system='Linux', executables=(), root=False):
        monkeypatch.setattr(detector_module.platform, 'system', lambda: system)
        monkeypatch.setattr(
            detector_module.shutil, 'which',
            lambda name: f'/usr/bin/{name}' if name in executables else None,
        )
        monkeypatch.setattr(detector_module.os, 'geteuid', lambda: 0 if root else 1000, raising=False)
        return PlatformDetector(wsl_marker=marker)

    _configure.marker = marker
    return _configure


class TestPackageManagerDetection:
    def test_macos_uses_homebrew(self, fake_system):
        info = fake_system('Darwin').detect()
        assert info.os_type == OSType.MACOS
        assert info.package_manager == PackageManager.BREW

    @pytest.mark.parametrize('executables, expected', [
        (('apt-get',), PackageManager.APT),
        (('dnf',), PackageManager.DNF),
        (('pacman',), PackageManager.PACMAN),
        (('apt-get', 'dnf', 'pacman'), PackageManager.APT),
        (('dnf', 'pacman'), PackageManager.DNF),
    ])
    def test_linux_probe_order(self, fake_system, executables, expected):
        assert fake_system('Linux', executables).detect().package_manager == expected

    def test_unknown_linux_distribution(self, fake_system):
        with pytest.raises(UnsupportedPlatformError, match='Unsupported Linux distribution'):
            fake_system('Linux', ()).detect()

    def test_unknown_os(self, fake_system):
        with pytest.raises(UnsupportedPlatformError, match='Unsupported OS'):
            fake_system('SunOS').detect()


class TestEnvironmentFlags:
    def test_wsl_marker(self, fake_system):
        detector = fake_system('Linux', ('apt-get',))
        fake_system.marker.write_text('5.15.90.1-microsoft-standard-WSL2\n')
        assert detector.detect().is_wsl

    def test_not_wsl(self, fake_system):
        assert not fake_system('Linux', ('apt-get',)).detect().is_wsl

    def test_missing_marker_is_not_wsl(self, fake_system, tmp_path):
        detector = fake_system('Linux', ('apt-get',))
        detector.wsl_marker = tmp_path / 'missing'
        assert not detector.detect().is_wsl

    def test_root_needs_no_sudo(self, fake_system):
        info = fake_system('Linux', ('dnf',), root=True).detect()
        assert info.has_root
        assert not info.needs_sudo

    def test_regular_user_needs_sudo(self, fake_system):
        assert fake_system('Linux', ('dnf',)).detect().needs_sudo
