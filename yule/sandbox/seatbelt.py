"""Seatbelt (SBPL) profile generation for macOS sandboxes."""

from __future__ import annotations

from .policy import SandboxConfig

_SYSTEM_READ_RULES = (
    '(allow file-read* (subpath "/usr/lib"))\n'
    '(allow file-read* (subpath "/System/Library"))\n'
    '(allow file-read* (subpath "/Library/Apple"))\n'
    '(allow file-read* (subpath "/usr/share"))\n'
    '(allow file-read* (subpath "/private/var/db/dyld"))\n'
    '(allow file-read* (literal "/dev/urandom"))\n'
    '(allow file-read* (literal "/dev/random"))\n\n'
)

_PROCESS_RULES = (
    "(allow process-exec*)\n"
    "(allow process-fork)\n"
    "(allow sysctl-read)\n"
    "(allow mach-lookup)\n"
    "(allow signal (target self))\n\n"
)

_GPU_RULES = (
    "(allow iokit-open)\n"
    '(allow file-read* (subpath "/Library/GPUBundles"))\n'
    '(allow file-read* (subpath "/System/Library/Extensions"))\n\n'
)

_NETWORK_RULES = (
    "(allow network-outbound)\n"
    "(allow network-inbound)\n"
    "(allow network-bind)\n"
    "(allow system-socket)\n\n"
)


def build_seatbelt_profile(config: SandboxConfig) -> str:
    """Deny-by-default profile allowing read-only model access and what the config permits."""
    parts = [
        "(version 1)\n",
        "(deny default)\n\n",
        f'(allow file-read* (literal "{config.model_path}"))\n\n',
        _SYSTEM_READ_RULES,
        _PROCESS_RULES,
    ]
    if config.allow_gpu:
        parts.append(_GPU_RULES)
    if config.allow_network:
        parts.append(_NETWORK_RULES)
    return "".join(parts)