"""Infrastructure layer — process-level concerns for the signal classification service.

Modules:
    settings    Environment / .env driven settings that build core configs.
    metrics     Prometheus metrics registry.
"""
