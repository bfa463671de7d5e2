"""Tests for qemurun.config module."""

from __future__ import annotations

import argparse
import uuid
from unittest.mock import patch

import pytest

from qemurun.config import apply_env_overrides, resolve_config
from qemurun.exceptions import NetworkConfigError, UsageError
from qemurun.models import BootMode, PortPublish, TapNetwork, UserNetwork


def _args(**overrides) -> argparse.Namespace:
    values = {
        "target": "/images/android-kernel",
        "gui": None,
        "kernel": None,
        "state": None,
        "data": None,
        "kvm": None,
        "arch": "x86_64",
        "cpus": "2",
        "mem": "2048",
        "networking": "user",
        "publish": [],
        "cdrom": [],
        "disk_size": None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.mark.usefixtures("clean_env")
class TestResolveConfig:
    def test_defaults(self):
        with patch("qemurun.config.kvm_available", return_value=False):
            cfg = resolve_config(_args(), environ={})
        assert cfg.boot_target == "/images/android-kernel"
        assert cfg.boot_mode == BootMode.KERNEL
        assert cfg.gui is True
        assert cfg.kvm is False
        assert cfg.cpus == 2
        assert cfg.memory_mb == 2048
        assert cfg.network == UserNetwork()
        assert cfg.publish == []
        assert cfg.state_dir is None
        assert cfg.qemu_binary == ""
        uuid.UUID(cfg.uuid)

    def test_missing_target_raises(self):
        with pytest.raises(UsageError, match="No boot target"):
            resolve_config(_args(target=None), environ={})

    def test_kvm_defaults_to_host_presence(self):
        with patch("qemurun.config.kvm_available", return_value=True):
            cfg = resolve_config(_args(), environ={})
        assert cfg.kvm is True

    def test_explicit_kvm_flag_skips_probe(self):
        with patch("qemurun.config.kvm_available") as mock_probe:
            cfg = resolve_config(_args(kvm=False), environ={})
        assert cfg.kvm is False
        mock_probe.assert_not_called()

    def test_iso_boot_mode(self):
        cfg = resolve_config(_args(kernel=False, kvm=False), environ={})
        assert cfg.boot_mode == BootMode.ISO

    def test_arch_defaults_to_host(self):
        with patch("qemurun.config.host_arch", return_value="aarch64"):
            cfg = resolve_config(_args(arch=None, kvm=False), environ={})
        assert cfg.arch == "aarch64"

    def test_arch_alias(self):
        cfg = resolve_config(_args(arch="arm64", kvm=False), environ={})
        assert cfg.arch == "aarch64"

    def test_unsupported_arch_raises(self):
        with pytest.raises(UsageError, match="Unsupported arch 'mips64'"):
            resolve_config(_args(arch="mips64", kvm=False), environ={})

    @pytest.mark.parametrize("field,value", [("cpus", "two"), ("cpus", "0"), ("mem", "-1")])
    def test_invalid_sizing_raises(self, field, value):
        with pytest.raises(UsageError):
            resolve_config(_args(kvm=False, **{field: value}), environ={})

    def test_publish_order_and_duplicates_preserved(self):
        cfg = resolve_config(_args(kvm=False, publish=["8080:80", "2222:22", "8080:80"]), environ={})
        assert cfg.publish == [PortPublish(8080, 80), PortPublish(2222, 22), PortPublish(8080, 80)]

    def test_networking_parsed_at_boundary(self):
        cfg = resolve_config(_args(kvm=False, networking="tap,tap0"), environ={})
        assert cfg.network == TapNetwork("tap0")

    def test_malformed_networking_raises(self):
        with pytest.raises(NetworkConfigError):
            resolve_config(_args(kvm=False, networking="bridge"), environ={})

    def test_invalid_disk_size_raises(self):
        with pytest.raises(UsageError, match="Invalid disk size"):
            resolve_config(_args(kvm=False, disk_size="lots"), environ={})

    def test_cdrom_order_preserved(self):
        cfg = resolve_config(_args(kvm=False, cdrom=["/b.iso", "/a.iso"]), environ={})
        assert cfg.iso_images == ["/b.iso", "/a.iso"]

    def test_fresh_uuid_per_run(self):
        first = resolve_config(_args(kvm=False), environ={})
        second = resolve_config(_args(kvm=False), environ={})
        assert first.uuid != second.uuid

    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("QEMURUN_KVM", "1")
        cfg = resolve_config(_args(kvm=False))
        assert cfg.kvm is True


@pytest.mark.usefixtures("clean_env")
class TestApplyEnvOverrides:
    def test_env_overrides_flag(self):
        cfg = resolve_config(_args(kvm=True), environ={"QEMURUN_KVM": "false"})
        assert cfg.kvm is False

    def test_gui_override(self, default_launch_config):
        cfg = apply_env_overrides(default_launch_config, environ={"QEMURUN_GUI": "0"})
        assert cfg.gui is False

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on", "t"])
    def test_truthy_values(self, default_launch_config, value):
        cfg = apply_env_overrides(default_launch_config, environ={"QEMURUN_KVM": value})
        assert cfg.kvm is True

    def test_invalid_value_raises(self, default_launch_config):
        with pytest.raises(UsageError, match="QEMURUN_KVM must be a boolean"):
            apply_env_overrides(default_launch_config, environ={"QEMURUN_KVM": "maybe"})

    def test_unset_leaves_config_alone(self, default_launch_config):
        cfg = apply_env_overrides(default_launch_config, environ={})
        assert cfg.kvm is False
        assert cfg.gui is True
