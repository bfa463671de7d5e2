"""Network device configuration for qemu-run.

The emulator's ``-netdev`` option is rendered from a networking-mode
descriptor (``mode[,arg]``) and the list of published ports.  Published ports
only make sense with user-mode networking, where they become ``hostfwd``
rules; every other mode rejects them.
"""

from __future__ import annotations

from typing import List, Sequence

from qemurun.constants import DEFAULT_NETWORKING, NETDEV_ID, PUBLISH_PROTOCOLS
from qemurun.exceptions import NetworkConfigError, UsageError
from qemurun.models import (
    BridgeNetwork,
    NetworkMode,
    NoNetwork,
    PortPublish,
    TapNetwork,
    UserNetwork,
)


def parse_publish(raw: str) -> PortPublish:
    """Parse ``host:guest[/proto]`` into a PortPublish."""
    entry = raw.strip()
    protocol = "tcp"
    if "/" in entry:
        entry, protocol = entry.rsplit("/", 1)
        protocol = protocol.lower()
        if protocol not in PUBLISH_PROTOCOLS:
            supported = ", ".join(sorted(PUBLISH_PROTOCOLS))
            raise UsageError(f"Invalid --publish '{raw}': protocol must be one of {supported}")
    parts = entry.split(":")
    if len(parts) != 2:
        raise UsageError(f"Invalid --publish '{raw}': expected format host_port:guest_port[/protocol]")
    try:
        host_port = int(parts[0])
        guest_port = int(parts[1])
    except ValueError:
        raise UsageError(f"Invalid --publish '{raw}': ports must be integers")
    if not (1 <= host_port <= 65535):
        raise UsageError(f"Invalid --publish '{raw}': host port {host_port} out of range (1-65535)")
    if not (1 <= guest_port <= 65535):
        raise UsageError(f"Invalid --publish '{raw}': guest port {guest_port} out of range (1-65535)")
    return PortPublish(host_port=host_port, guest_port=guest_port, protocol=protocol)


def parse_network_mode(descriptor: str) -> NetworkMode:
    """Turn ``mode[,arg]`` into one of the NetworkMode variants."""
    raw = (descriptor or "").strip() or DEFAULT_NETWORKING
    keyword, sep, arg = raw.partition(",")
    keyword = keyword.strip().lower()
    arg = arg.strip()
    has_arg = bool(sep)

    if keyword in ("user", "none"):
        if has_arg:
            raise NetworkConfigError(f"Networking mode '{keyword}' takes no argument (got '{arg}')")
        return UserNetwork() if keyword == "user" else NoNetwork()

    if keyword in ("tap", "bridge"):
        what = "interface" if keyword == "tap" else "bridge"
        article = "an" if keyword == "tap" else "a"
        if not arg:
            raise NetworkConfigError(f"Networking mode '{keyword}' requires {article} {what} name: use '{keyword},<{what}>'")
        if "," in arg:
            raise NetworkConfigError(f"Networking mode '{keyword}' takes exactly one {what} name (got '{arg}')")
        return TapNetwork(interface=arg) if keyword == "tap" else BridgeNetwork(bridge=arg)

    raise NetworkConfigError(f"Unsupported networking mode '{keyword}'. Expected one of none, user, tap, bridge.")


def _hostfwd(port: PortPublish) -> str:
    return f"hostfwd={port.protocol}::{port.host_port}-:{port.guest_port}"


def render_netdev(mode: NetworkMode, publish: Sequence[PortPublish] = ()) -> str:
    """Render the ``-netdev`` value for ``mode``; empty means no networking."""
    if publish and not isinstance(mode, UserNetwork):
        raise NetworkConfigError(
            f"--publish is only supported with 'user' networking, not '{mode.keyword}'"
        )

    if isinstance(mode, UserNetwork):
        parts: List[str] = ["user", f"id={NETDEV_ID}"]
        parts.extend(_hostfwd(port) for port in publish)
        return ",".join(parts)

    if isinstance(mode, TapNetwork):
        return f"tap,id={NETDEV_ID},ifname={mode.interface},script=no,downscript=no"

    if isinstance(mode, BridgeNetwork):
        return f"bridge,id={NETDEV_ID},br={mode.bridge}"

    if isinstance(mode, NoNetwork):
        return ""

    raise NetworkConfigError(f"Unsupported networking mode: {mode!r}")
