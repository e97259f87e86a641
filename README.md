# yule

Building blocks for keeping local language-model files trustworthy and
contained: content hashing, key storage, fetching and caching GGUF files,
inference settings, and sandbox rules.

The package is split into four parts:

- `yule.verify`: BLAKE3 Merkle roots over raw tensor data, Ed25519
  signature checks, and a key store for the device signing key and
  trusted publisher keys.
- `yule.registry`: model references such as `publisher/repo:q4_k_m`, an
  async client for the model hub file API, resumable downloads with
  progress on stderr, quantization selection, and an on-disk cache with
  JSON metadata sidecars.
- `yule.infer`: sampling parameters, inference configuration, generation
  requests, and KV cache sizing.
- `yule.sandbox`: sandbox configurations and policies (with JSON
  round-trips), the Linux seccomp allowlist and Landlock path rules, an
  address-space limit, and macOS Seatbelt profiles.

Python 3.10 or later is required. The package depends on `cryptography`
and `httpx`.

## Merkle roots

```python
from yule.verify.merkle import MerkleTree, blake3_digest

data = open("tensors.bin", "rb").read()
root = MerkleTree().build(data)          # 1 MiB leaves by default
print(root.hex, root.leaf_count)
print(MerkleTree().verify(data, root.hash))

with open("tensors.bin", "rb") as f:
    print(MerkleTree().verify_streaming(f, root.hash))
```

Leaves are hashed with BLAKE3; pairs of nodes are hashed together and an
odd node is carried up unchanged. Empty data gives a root of 32 zero
bytes. `blake3_digest(data)` returns the plain 32-byte BLAKE3 hash.

## Signatures and keys

```python
from yule.verify.signature import SignatureVerifier
from yule.verify.keys import KeyStore

store = KeyStore.open()                  # ~/.yule/keys, created if missing
device_key = store.device_key()          # generated and saved on first use
print(store.list_publishers())

ok = SignatureVerifier().verify_ed25519(public_key, message, signature)
```

`verify_ed25519` returns `False` for a signature that does not match and
raises `VerificationError` when the key is not 32 bytes or the signature
not 64. `KeyStore.open_at(path)` uses another directory;
`trust_publisher(name, public_key)` stores a raw 32-byte public key as
`{name}.pub` and `publisher_key(name)` loads it back, or returns `None`.

## Model references and quantizations

```python
from yule.registry.resolve import parse_model_ref
from yule.registry.quant import extract_quant_label

print(parse_model_ref("bartowski/Llama-3.2-1B-Instruct-GGUF:q4_k_m"))
# RemoteModel(publisher='bartowski', name='Llama-3.2-1B-Instruct-GGUF', quantization='q4_k_m')
print(parse_model_ref("./model.gguf"))   # LocalFile(path='./model.gguf')
print(extract_quant_label("Llama-3.2-1B-Instruct-Q4_K_M.gguf"))  # Q4_K_M
```

`select_gguf_file(files, requested_quant)` picks the requested label
(case-insensitive); otherwise it goes by this order of preference:
Q4_K_M, Q4_K_S, Q5_K_M, Q5_K_S, Q4_0, Q6_K, Q8_0, Q3_K_M, Q3_K_S, Q2_K,
IQ4_XS, IQ4_NL; failing all of those, the first file.

## Listing and downloading

```python
import asyncio
from yule.registry.hf_api import HfApiClient
from yule.registry.pull import ModelPuller
from yule.registry.quant import filter_gguf_files, select_gguf_file

async def fetch(owner, repo, dest_dir):
    async with HfApiClient() as client:
        files = filter_gguf_files(await client.list_repo_files(owner, repo))
        chosen = select_gguf_file(files)
        url = HfApiClient.download_url(owner, repo, chosen.path)
        return await ModelPuller(client).download(url, f"{dest_dir}/{chosen.path}")

asyncio.run(fetch("bartowski", "Llama-3.2-1B-Instruct-GGUF", "models"))
```

Downloads go to a `.part` file next to the destination and resume from
its size when one is already there. Failures raise `RegistryError`.

## The cache

`ModelCache(base_dir)` keeps files at `{base}/{publisher}/{repo}/{filename}`
with a `cache.json` sidecar per repository (`write_metadata`, `list_all`,
`evict`, `find_any`). `Registry(cache_dir, hf_token=None)` combines the
cache with the hub clients: `resolve_local(model_ref)` finds a model on
disk without downloading, `list_cached()` summarises the sidecars, and
`Registry.default_cache_dir()` is `~/.yule/models` (`%APPDATA%\yule\models`
on Windows).

## Inference settings

```python
from yule.infer.params import SamplingParams, GenerateRequest
from yule.infer.kv_cache import KvCache

params = SamplingParams()   # temperature 0.7, top_p 0.9, top_k 40, min_p 0.05
request = GenerateRequest(tokens=[1, 2, 3], max_new_tokens=64, sampling=params)
print(KvCache(32, 8, 128, 4096).size_bytes())   # 536870912 bytes of f16 keys and values
```

## Sandbox rules

```python
from yule.sandbox.policy import SandboxConfig, SandboxPolicy
from yule.sandbox.linux import seccomp_allowlist, landlock_rules
from yule.sandbox.seatbelt import build_seatbelt_profile

policy = SandboxPolicy.inference_default("/models/model.gguf")
assert SandboxPolicy.from_json(policy.to_json()) == policy

config = SandboxConfig("/models/model.gguf", allow_gpu=True,
                       max_memory_bytes=32 << 30, allow_network=False)
print(sorted(seccomp_allowlist(config)))
print(landlock_rules(config))
print(build_seatbelt_profile(config))
```

The default inference policy denies network access, allows the GPU, makes
the model file the only readable path and caps memory at 32 GiB.
`apply_rlimit(max_memory_bytes)` sets the address-space limit of the
current process where the platform supports it.

## What is not included

- No model execution: there is no weight loading, forward pass or token
  sampler; `yule.infer` holds settings and cache sizing only.
- No signed model manifest format and no combined integrity check; the
  pieces (`MerkleTree`, `SignatureVerifier`, `KeyStore`) are there to build
  one.
- `Registry` has no one-step pull; listing, selecting, downloading and
  recording metadata are done with the parts shown above.
- The seccomp allowlist, Landlock rules and Seatbelt profile are produced
  as data; nothing here installs them into the kernel. Only the memory
  limit is applied directly.
- There is no command-line program.

## Tests

The test suite uses pytest, pytest-asyncio and respx, available through
the `test` extra.