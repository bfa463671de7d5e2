"""Synchronous emulator launch for qemu-run."""

from __future__ import annotations

import signal
import subprocess
from typing import List

from qemurun.exceptions import LaunchFailure
from qemurun.utils import log


def launch(cmd: List[str]) -> int:
    """Run ``cmd`` in the foreground and wait for it to exit.

    The child inherits stdin/stdout/stderr and stays in our process group.
    SIGINT and SIGTERM received by this process are forwarded to the child,
    and we keep waiting until it is gone.
    """
    log("INFO", f"Starting {cmd[0]}")
    try:
        proc = subprocess.Popen(cmd)
    except OSError as exc:
        raise LaunchFailure(f"Failed to start {cmd[0]}: {exc}")

    def _terminate_child(signum, frame):
        proc.terminate()

    prev_sigterm = signal.signal(signal.SIGTERM, _terminate_child)
    try:
        while True:
            try:
                returncode = proc.wait()
                break
            except KeyboardInterrupt:
                log("DEBUG", "Interrupt received; forwarding SIGINT to the emulator")
                proc.send_signal(signal.SIGINT)
    finally:
        signal.signal(signal.SIGTERM, prev_sigterm)

    if returncode == 0:
        log("SUCCESS", f"{cmd[0]} exited cleanly")
        return 0
    if returncode < 0:
        signum = -returncode
        try:
            sig_name = signal.Signals(signum).name
        except ValueError:
            sig_name = f"signal {signum}"
        raise LaunchFailure(f"{cmd[0]} was terminated by {sig_name}", exit_code=128 + signum, signal_name=sig_name)
    raise LaunchFailure(f"{cmd[0]} exited with status {returncode}", exit_code=returncode)
