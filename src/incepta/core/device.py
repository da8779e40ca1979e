"""
Device Management
=================

This module provides centralized device management for TorchScript graphs.

Usage:
    from incepta.core.device import get_device

    device = get_device()
    module = module.to(device)
"""

from typing import Optional, Union

import torch

from incepta.core.logger import get_logger

logger = get_logger(__name__)


def get_device(prefer_cuda: bool = True) -> torch.device:
    """
    Get the best available device for computation.

    Args:
        prefer_cuda: If True (default), prefer CUDA if available.

    Returns:
        torch.device: The selected device (cuda or cpu)
    """
    if prefer_cuda and torch.cuda.is_available():
        device = torch.device("cuda")
        logger.debug(f"Using CUDA device: {torch.cuda.get_device_name(0)}")
    else:
        device = torch.device("cpu")
        logger.debug("Using CPU device")

    return device


def resolve_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """
    Turn an optional device name into a torch.device.

    Args:
        device: "cpu", "cuda", a torch.device, or None to auto-detect

    Returns:
        torch.device
    """
    if device is None:
        return get_device()
    if isinstance(device, str):
        return torch.device(device)
    return device
