"""Linux sandbox layers: memory limit, landlock path rules and the seccomp allowlist."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .policy import SandboxConfig, SandboxError

READ_FILE = "read_file"
READ_DIR = "read_dir"
IOCTL_DEV = "ioctl_dev"

_MEMORY_SYSCALLS = (
    "read",
    "write",
    "readv",
    "writev",
    "pread64",
    "pwrite64",
    "mmap",
    "mprotect",
    "munmap",
    "mremap",
    "madvise",
    "brk",
)

# Landlock decides which files may actually be opened.
_FILE_SYSCALLS = (
    "openat",
    "close",
    "fstat",
    "newfstatat",
    "lseek",
    "access",
    "faccessat2",
    "statx",
    "readlink",
    "readlinkat",
    "getcwd",
    "fcntl",
    "dup",
    "dup2",
    "dup3",
)

_THREAD_SYSCALLS = (
    "clone3",
    "clone",
    "futex",
    "set_robust_list",
    "get_robust_list",
    "sched_yield",
    "sched_getaffinity",
    "nanosleep",
    "clock_nanosleep",
)

_SIGNAL_SYSCALLS = ("rt_sigaction", "rt_sigprocmask", "rt_sigreturn", "sigaltstack")

_TIME_SYSCALLS = ("clock_gettime", "clock_getres", "gettimeofday")

_EVENT_LOOP_SYSCALLS = (
    "epoll_create1",
    "epoll_ctl",
    "epoll_wait",
    "epoll_pwait",
    "eventfd2",
    "pipe2",
)

_IDENTITY_SYSCALLS = ("getpid", "gettid", "getuid", "getgid", "geteuid", "getegid")

_MISC_SYSCALLS = (
    "arch_prctl",
    "set_tid_address",
    "getrandom",
    "uname",
    "prctl",
    "exit",
    "exit_group",
    "rseq",
    "membarrier",
)

_NETWORK_SYSCALLS = (
    "socket",
    "bind",
    "listen",
    "accept4",
    "connect",
    "setsockopt",
    "getsockopt",
    "getsockname",
    "getpeername",
    "sendto",
    "recvfrom",
    "sendmsg",
    "recvmsg",
    "shutdown",
    "poll",
    "ppoll",
)

_GPU_SYSCALLS = ("ioctl",)

_BASE_SYSCALLS = (
    *_MEMORY_SYSCALLS,
    *_FILE_SYSCALLS,
    *_THREAD_SYSCALLS,
    *_SIGNAL_SYSCALLS,
    *_TIME_SYSCALLS,
    *_EVENT_LOOP_SYSCALLS,
    *_IDENTITY_SYSCALLS,
    *_MISC_SYSCALLS,
)

_SYSTEM_PATHS = (
    "/usr/lib",
    "/usr/lib64",
    "/lib",
    "/lib64",
    "/etc/ld.so.cache",
    "/proc/self",
)

_GPU_PATHS = ("/dev/dri", "/dev")


@dataclass(frozen=True)
class PathRule:
    """Access granted beneath one path.

    A required rule must be applied; an optional one is skipped when the
    path does not exist.
    """

    path: Path
    access: frozenset[str]
    required: bool = False


def seccomp_allowlist(config: SandboxConfig) -> frozenset[str]:
    """Names of the syscalls the filter lets through; all others fail with EPERM."""
    allowed = set(_BASE_SYSCALLS)
    if config.allow_network:
        allowed.update(_NETWORK_SYSCALLS)
    if config.allow_gpu:
        allowed.update(_GPU_SYSCALLS)
    return frozenset(allowed)


def landlock_rules(config: SandboxConfig) -> list[PathRule]:
    """Filesystem rules: the model read-only, GPU device nodes, and system libraries."""
    rules = [PathRule(Path(config.model_path), frozenset({READ_FILE}), required=True)]
    if config.allow_gpu:
        gpu_access = frozenset({READ_FILE, READ_DIR, IOCTL_DEV})
        rules.extend(PathRule(Path(p), gpu_access) for p in _GPU_PATHS)
    read_dir = frozenset({READ_FILE, READ_DIR})
    rules.extend(PathRule(Path(p), read_dir) for p in _SYSTEM_PATHS)
    return rules


def apply_rlimit(max_memory_bytes: int) -> None:
    """Cap the address space of the current process (soft and hard limit)."""
    if isinstance(max_memory_bytes, bool) or not isinstance(max_memory_bytes, int):
        raise SandboxError("memory limit must be an integer")
    if max_memory_bytes < 0:
        raise SandboxError("memory limit must not be negative")
    try:
        import resource
    except ImportError as exc:
        raise SandboxError("setrlimit(RLIMIT_AS) is not available on this platform") from exc
    try:
        resource.setrlimit(resource.RLIMIT_AS, (max_memory_bytes, max_memory_bytes))
    except (OSError, ValueError) as exc:
        raise SandboxError(f"setrlimit(RLIMIT_AS) failed: {exc}") from exc