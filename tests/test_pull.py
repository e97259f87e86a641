import httpx
import pytest
import respx

from yule.registry.hf_api import HfApiClient, RegistryError
from yule.registry.pull import ModelPuller, format_bytes, format_duration

URL = "https://huggingface.co/owner/repo/resolve/main/model.gguf"


def test_format_bytes_small_values_are_plain():
    assert format_bytes(512) == "512 B"
    assert format_bytes(0) == "0 B"


def test_format_bytes_pinned_values():
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(1024 * 1024 * 1024) == "1.00 GB"


@pytest.mark.parametrize(
    ("n", "unit"),
    [
        (1023, " B"),
        (1024, " KB"),
        (5 * 1024 * 1024, " MB"),
        (3 * 1024 * 1024 * 1024, " GB"),
    ],
)
def test_format_bytes_units(n, unit):
    assert format_bytes(n).endswith(unit)


def test_format_duration_seconds_keep_input():
    assert format_duration(42) == "42s"


def test_format_duration_hours():
    assert format_duration(3700) == "1h1m"


@pytest.mark.parametrize(
    ("secs", "marker"),
    [(59, "s"), (61, "m"), (125, "m"), (3600, "h"), (7300, "h")],
)
def test_format_duration_shapes(secs, marker):
    text = format_duration(secs)
    assert marker in text
    if secs < 3600:
        assert "h" not in text


@pytest.mark.asyncio
async def test_download_writes_file_and_removes_part(tmp_path):
    content = b"gguf" * 4096
    dest = tmp_path / "owner" / "repo" / "model.gguf"
    async with HfApiClient() as client:
        with respx.mock() as router:
            router.get(URL).mock(return_value=httpx.Response(200, content=content))
            result = await ModelPuller(client).download(URL, dest)
    assert result == dest
    assert dest.read_bytes() == content
    assert not (dest.parent / "model.gguf.part").exists()


@pytest.mark.asyncio
async def test_download_resumes_from_part_file(tmp_path):
    dest = tmp_path / "model.gguf"
    head, tail = b"first-half-", b"second-half"
    (tmp_path / "model.gguf.part").write_bytes(head)
    async with HfApiClient() as client:
        with respx.mock() as router:
            route = router.get(URL).mock(
                return_value=httpx.Response(
                    206,
                    content=tail,
                    headers={"Content-Range": f"bytes {len(head)}-{len(head) + len(tail) - 1}/{len(head) + len(tail)}"},
                )
            )
            await ModelPuller(client).download(URL, dest)
    assert dest.read_bytes() == head + tail
    assert route.calls.last.request.headers["range"] == f"bytes={len(head)}-"


@pytest.mark.asyncio
async def test_empty_part_file_downloads_fresh(tmp_path):
    dest = tmp_path / "model.gguf"
    (tmp_path / "model.gguf.part").write_bytes(b"")
    content = b"fresh"
    async with HfApiClient() as client:
        with respx.mock() as router:
            route = router.get(URL).mock(return_value=httpx.Response(200, content=content))
            await ModelPuller(client).download(URL, dest)
    assert dest.read_bytes() == content
    assert "range" not in route.calls.last.request.headers


@pytest.mark.asyncio
async def test_download_failure_leaves_no_file(tmp_path):
    dest = tmp_path / "model.gguf"
    async with HfApiClient() as client:
        with respx.mock() as router:
            router.get(URL).mock(return_value=httpx.Response(404))
            with pytest.raises(RegistryError, match="failed to start download"):
                await ModelPuller(client).download(URL, dest)
    assert not dest.exists()