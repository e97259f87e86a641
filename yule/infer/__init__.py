"""Sampling parameters, inference configuration, generation requests and KV cache sizing."""