"""Data models for qemu-run."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, List, NamedTuple, Optional, Union


class BootMode(str, enum.Enum):
    KERNEL = "kernel"
    ISO = "iso"


class PortPublish(NamedTuple):
    host_port: int
    guest_port: int
    protocol: str = "tcp"

    def __str__(self) -> str:
        return f"{self.host_port}:{self.guest_port}/{self.protocol}"


@dataclass(frozen=True)
class NoNetwork:
    keyword: ClassVar[str] = "none"


@dataclass(frozen=True)
class UserNetwork:
    keyword: ClassVar[str] = "user"


@dataclass(frozen=True)
class TapNetwork:
    interface: str
    keyword: ClassVar[str] = "tap"


@dataclass(frozen=True)
class BridgeNetwork:
    bridge: str
    keyword: ClassVar[str] = "bridge"


NetworkMode = Union[NoNetwork, UserNetwork, TapNetwork, BridgeNetwork]


@dataclass
class LaunchConfig:
    boot_target: str
    boot_mode: BootMode
    gui: bool
    arch: str
    cpus: int
    memory_mb: int
    kvm: bool
    network: NetworkMode
    uuid: str
    publish: List[PortPublish] = field(default_factory=list)
    iso_images: List[str] = field(default_factory=list)
    state_dir: Optional[str] = None
    data: Optional[str] = None
    disk_size: Optional[str] = None
    # Filled in by the later stages
    netdev: str = ""
    qemu_binary: str = ""
    image_tool: str = ""
    initrd_path: Optional[str] = None
    kernel_cmdline: str = ""
    boot_iso_path: Optional[str] = None
    disk_path: Optional[str] = None
