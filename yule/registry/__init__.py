"""Model references, hub access, resumable downloads and the local model cache."""