from dataclasses import replace

from yule.infer.params import GenerateRequest, InferenceConfig, SamplingParams


def test_sampling_defaults():
    p = SamplingParams()
    assert (p.temperature, p.top_p, p.top_k, p.repetition_penalty, p.min_p) == (
        0.7,
        0.9,
        40,
        1.1,
        0.05,
    )


def test_inference_config_defaults():
    c = InferenceConfig()
    assert c.max_context_len == 4096
    assert c.batch_size == 1


def test_generate_request_has_independent_sampling():
    a = GenerateRequest(tokens=[1, 2], max_new_tokens=5)
    b = GenerateRequest(tokens=[3], max_new_tokens=5)
    a.sampling.top_k = 7
    assert b.sampling.top_k == SamplingParams().top_k
    assert a.sampling.top_k == 7


def test_replace_round_trip():
    p = SamplingParams()
    q = replace(p, temperature=1.0)
    assert q.temperature == 1.0
    assert replace(q, temperature=p.temperature) == p