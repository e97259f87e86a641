import resource
from pathlib import Path
from unittest import mock

import pytest

from yule.sandbox.linux import (
    IOCTL_DEV,
    READ_DIR,
    READ_FILE,
    PathRule,
    apply_rlimit,
    landlock_rules,
    seccomp_allowlist,
)
from yule.sandbox.policy import SandboxConfig, SandboxError


def make_config(allow_gpu=False, allow_network=False):
    return SandboxConfig(
        model_path=Path("/tmp/test.gguf"),
        allow_gpu=allow_gpu,
        max_memory_bytes=32 * 1024 * 1024 * 1024,
        allow_network=allow_network,
    )


def test_rlimit_applies():
    limit_bytes = 64 * 1024 * 1024 * 1024
    with mock.patch("resource.setrlimit") as setrlimit:
        apply_rlimit(limit_bytes)
    setrlimit.assert_called_once_with(resource.RLIMIT_AS, (limit_bytes, limit_bytes))


def test_rlimit_failure_raises():
    with mock.patch("resource.setrlimit", side_effect=OSError("denied")):
        with pytest.raises(SandboxError, match="setrlimit"):
            apply_rlimit(1024)


def test_rlimit_rejects_negative():
    with pytest.raises(SandboxError):
        apply_rlimit(-1)


def test_core_syscalls_always_allowed():
    rules = seccomp_allowlist(make_config())
    for name in ("read", "write", "mmap", "openat", "close", "exit_group"):
        assert name in rules


def test_base_allowlist_size():
    assert len(seccomp_allowlist(make_config())) == 64


def test_full_allowlist_size():
    assert len(seccomp_allowlist(make_config(allow_gpu=True, allow_network=True))) == 81


def test_seccomp_network_adds_socket_syscalls():
    no_net = seccomp_allowlist(make_config())
    with_net = seccomp_allowlist(make_config(allow_network=True))
    assert "socket" not in no_net
    assert "socket" in with_net
    assert {"bind", "listen", "accept4"} <= with_net


def test_seccomp_gpu_adds_ioctl():
    no_gpu = seccomp_allowlist(make_config())
    with_gpu = seccomp_allowlist(make_config(allow_gpu=True))
    assert "ioctl" not in no_gpu
    assert "ioctl" in with_gpu
    assert with_gpu - no_gpu == {"ioctl"}


def test_landlock_model_rule_is_read_only_and_required():
    rules = landlock_rules(make_config())
    assert rules[0] == PathRule(Path("/tmp/test.gguf"), frozenset({READ_FILE}), True)


def test_landlock_system_paths_without_gpu():
    rules = landlock_rules(make_config())
    paths = [str(r.path) for r in rules[1:]]
    assert paths == ["/usr/lib", "/usr/lib64", "/lib", "/lib64", "/etc/ld.so.cache", "/proc/self"]
    assert all(r.access == frozenset({READ_FILE, READ_DIR}) for r in rules[1:])
    assert not any(r.required for r in rules[1:])


def test_landlock_gpu_adds_device_nodes():
    rules = landlock_rules(make_config(allow_gpu=True))
    gpu = [r for r in rules if IOCTL_DEV in r.access]
    assert [str(r.path) for r in gpu] == ["/dev/dri", "/dev"]
    assert len(rules) == 9