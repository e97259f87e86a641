"""Inference configuration and generation request types."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SamplingParams:
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 40
    repetition_penalty: float = 1.1
    min_p: float = 0.05


@dataclass
class InferenceConfig:
    max_context_len: int = 4096
    batch_size: int = 1


@dataclass
class GenerateRequest:
    tokens: list[int]
    max_new_tokens: int
    sampling: SamplingParams = field(default_factory=SamplingParams)