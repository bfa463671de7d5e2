"""Shared test fixtures."""

from __future__ import annotations

import pytest

from qemurun.config import ENV_OVERRIDES
from qemurun.models import BootMode, LaunchConfig, UserNetwork

TEST_UUID = "0b2c4a3e-6f3e-4d6a-9a5c-2b1f0e8d7c6b"


@pytest.fixture
def default_launch_config() -> LaunchConfig:
    """Return a fully resolved LaunchConfig, ready for the command builder."""
    return LaunchConfig(
        boot_target="/images/android-kernel",
        boot_mode=BootMode.KERNEL,
        gui=True,
        arch="x86_64",
        cpus=2,
        memory_mb=2048,
        kvm=False,
        network=UserNetwork(),
        uuid=TEST_UUID,
        state_dir="/images/android-state",
        netdev="user,id=t0",
        qemu_binary="/usr/bin/qemu-system-x86_64",
        initrd_path="/images/android-initrd.img",
        kernel_cmdline="console=ttyS0",
    )


@pytest.fixture
def boot_files(tmp_path):
    """Create a kernel/initrd/cmdline/iso set like the image builders produce."""
    kernel = tmp_path / "android-kernel"
    kernel.write_bytes(b"kernel")
    (tmp_path / "android-initrd.img").write_bytes(b"initrd")
    (tmp_path / "android-cmdline").write_text("console=ttyS0 quiet\n")
    (tmp_path / "android.iso").write_bytes(b"iso")
    return kernel


@pytest.fixture
def clean_env(monkeypatch):
    """Clear every environment override so tests start from the flag values."""
    for key in ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
