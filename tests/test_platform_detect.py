"""
Tests for platform detection — identifier mapping and GPU probing.
"""

import pytest

from mlinstall.adapters.platform_probe import StaticPlatformProbe
from mlinstall.core.errors import UnsupportedPlatformError
from mlinstall.core.services.platform_detect import (
    canonical_arch,
    canonical_os,
    detect_gpu,
    detect_platform,
)


class TestCanonicalLabels:
    @pytest.mark.parametrize("raw,label", [("Linux", "linux"), ("Darwin", "osx"), ("Linux-5.15", "linux")])
    def test_known_os(self, raw, label):
        assert canonical_os(raw) == label

    @pytest.mark.parametrize("raw", ["Windows", "FreeBSD", "CYGWIN_NT-10.0", "", "linux"])
    def test_unknown_os(self, raw):
        with pytest.raises(UnsupportedPlatformError, match="operating system"):
            canonical_os(raw)

    @pytest.mark.parametrize("raw,label", [("x86_64", "x86_64"), ("arm64", "arm64"), ("arm64e", "arm64")])
    def test_known_arch(self, raw, label):
        assert canonical_arch(raw) == label

    @pytest.mark.parametrize("raw", ["aarch64", "i686", "ppc64le", ""])
    def test_unknown_arch(self, raw):
        with pytest.raises(UnsupportedPlatformError, match="architecture"):
            canonical_arch(raw)


class TestDetectGpu:
    def test_amdgpu_loaded(self):
        probe = StaticPlatformProbe(modules={"amdgpu", "snd_hda_intel"})
        assert detect_gpu("linux", probe) == "amd"

    def test_other_modules(self):
        probe = StaticPlatformProbe(modules={"nvidia", "i915"})
        assert detect_gpu("linux", probe) == "other"

    def test_macos_never_probes_modules(self):
        probe = StaticPlatformProbe(os_id="Darwin", modules={"amdgpu"})
        assert detect_gpu("osx", probe) == "other"
        assert probe.module_queries == 0


class TestDetectPlatform:
    def test_linux_amd(self):
        d = detect_platform(StaticPlatformProbe("Linux", "x86_64", {"amdgpu"}))
        assert (d.os_family, d.arch, d.gpu) == ("linux", "x86_64", "amd")

    def test_mac_arm(self):
        d = detect_platform(StaticPlatformProbe("Darwin", "arm64"))
        assert (d.os_family, d.arch, d.gpu) == ("osx", "arm64", "other")

    def test_descriptor_is_frozen(self):
        d = detect_platform(StaticPlatformProbe())
        with pytest.raises(Exception):
            d.gpu = "amd"

    def test_unsupported_arch_on_supported_os(self):
        with pytest.raises(UnsupportedPlatformError):
            detect_platform(StaticPlatformProbe("Linux", "aarch64"))
