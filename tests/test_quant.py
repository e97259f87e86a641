from yule.registry.hf_api import HfFileEntry
from yule.registry.quant import extract_quant_label, filter_gguf_files, select_gguf_file


def entry(path, size, entry_type="file"):
    return HfFileEntry(path=path, size=size, entry_type=entry_type)


def test_extract_quant_labels():
    assert extract_quant_label("Llama-3.2-1B-Instruct-Q4_K_M.gguf") == "Q4_K_M"
    assert extract_quant_label("model-Q8_0.gguf") == "Q8_0"
    assert extract_quant_label("model-F16.gguf") == "F16"
    assert extract_quant_label("README.md") is None


def test_extract_is_case_insensitive():
    assert extract_quant_label("model-q6_k.gguf") == "Q6_K"


def test_extract_without_label():
    assert extract_quant_label("model.gguf") is None


def test_select_with_preference():
    files = [
        entry("model-Q8_0.gguf", 1000),
        entry("model-Q4_K_M.gguf", 500),
        entry("model-Q6_K.gguf", 800),
    ]
    assert select_gguf_file(files, None).path == "model-Q4_K_M.gguf"


def test_select_with_explicit_quant():
    files = [entry("model-Q4_K_M.gguf", 500), entry("model-Q8_0.gguf", 1000)]
    assert select_gguf_file(files, "q8_0").path == "model-Q8_0.gguf"


def test_select_unknown_request_falls_back_to_preference():
    files = [entry("model-Q8_0.gguf", 1000), entry("model-Q6_K.gguf", 800)]
    assert select_gguf_file(files, "Q2_K").path == "model-Q6_K.gguf"


def test_select_falls_back_to_first():
    files = [entry("alpha.gguf", 1), entry("beta.gguf", 2)]
    assert select_gguf_file(files).path == "alpha.gguf"


def test_select_empty_returns_none():
    assert select_gguf_file([], "Q4_K_M") is None


def test_filter_gguf_only():
    files = [
        entry("README.md", 100),
        entry("model-Q4_K_M.gguf", 500),
        entry("config.json", 200),
        entry("model-Q8_0.gguf", 1000),
    ]
    gguf = filter_gguf_files(files)
    assert len(gguf) == 2
    assert [f.path for f in gguf] == ["model-Q4_K_M.gguf", "model-Q8_0.gguf"]


def test_filter_skips_directories():
    files = [entry("subdir.gguf", 0, "directory"), entry("model-Q4_0.gguf", 10)]
    assert [f.path for f in filter_gguf_files(files)] == ["model-Q4_0.gguf"]