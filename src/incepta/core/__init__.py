"""Core Module

This package contains the core functionality for incepta including
image format checks, dataset loading, configuration and the frozen
graph / learning pipeline wrappers.

Submodules:
    - config: TOML configuration cascade
    - datasets: Tab-separated sample files
    - device: Device management for TorchScript graphs
    - http: Archive download and extraction
    - images: Magic-number image format sniffing
    - logger: Logging configuration
    - ml_config: Default model constants
    - paths: Assets path resolution

Note: Heavy dependencies (tensorflow, torch, sklearn) are imported lazily in submodules.
Import from specific submodules as needed:
    from incepta.core.images import get_image_format
    from incepta.core.ml.pipeline import LearningPipeline
"""
