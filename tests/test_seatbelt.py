from pathlib import Path

from yule.sandbox.policy import SandboxConfig
from yule.sandbox.seatbelt import build_seatbelt_profile


def make_config(allow_gpu, allow_network):
    return SandboxConfig(
        model_path=Path("/tmp/test-model.gguf"),
        allow_gpu=allow_gpu,
        max_memory_bytes=32 * 1024 * 1024 * 1024,
        allow_network=allow_network,
    )


def test_profile_contains_model_path():
    profile = build_seatbelt_profile(make_config(False, False))
    assert '(allow file-read* (literal "/tmp/test-model.gguf"))' in profile
    assert "(deny default)" in profile
    assert "(version 1)" in profile


def test_profile_starts_with_header():
    profile = build_seatbelt_profile(make_config(False, False))
    assert profile.startswith("(version 1)\n(deny default)\n\n")


def test_profile_default_denies_network():
    profile = build_seatbelt_profile(make_config(False, False))
    assert "network-outbound" not in profile
    assert "network-inbound" not in profile
    assert "network-bind" not in profile
    assert "iokit-open" not in profile


def test_profile_with_gpu():
    profile = build_seatbelt_profile(make_config(True, False))
    assert "iokit-open" in profile
    assert "GPUBundles" in profile
    assert "network-outbound" not in profile


def test_profile_with_network():
    profile = build_seatbelt_profile(make_config(False, True))
    assert "network-outbound" in profile
    assert "network-inbound" in profile
    assert "network-bind" in profile
    assert "system-socket" in profile
    assert profile.endswith("(allow system-socket)\n\n")


def test_profile_allows_system_libraries():
    profile = build_seatbelt_profile(make_config(False, False))
    assert '(allow file-read* (subpath "/usr/lib"))' in profile
    assert "(allow signal (target self))" in profile