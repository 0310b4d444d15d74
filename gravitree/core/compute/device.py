"""
Hardware detection and device management.

Only devices that can compute in float64 are eligible for the GPU
backends: CUDA devices qualify, Apple MPS does not.
"""

from dataclasses import dataclass
from typing import Literal
import platform


@dataclass(frozen=True)
class DeviceInfo:
    """
    Information about a compute device.

    Attributes:
        device_type: Type of device ('cpu', 'cuda')
        device_index: Device index (None for CPU)
        name: Human-readable device name
        memory_bytes: Total device memory in bytes (None if unknown)
    """
    device_type: Literal['cpu', 'cuda']
    device_index: int | None
    name: str
    memory_bytes: int | None = None

    def __str__(self) -> str:
        if self.device_type == 'cpu':
            return f"CPU ({self.name})"
        mem_str = ""
        if self.memory_bytes is not None:
            mem_str = f", {self.memory_bytes / (1024**3):.1f}GB"
        return f"CUDA:{self.device_index} ({self.name}{mem_str})"

    @property
    def is_gpu(self) -> bool:
        """True if this is a GPU device."""
        return self.device_type == 'cuda'


def detect_gpu() -> DeviceInfo | None:
    """
    Detect a float64-capable GPU, if any.

    Returns:
        DeviceInfo for the current CUDA device, or None if PyTorch is
        missing or no CUDA device is present.

    Note:
        torch is imported lazily to avoid import overhead when GPU
        detection isn't needed.
    """
    try:
        import torch
    except ImportError:
        return None

    if not torch.cuda.is_available():
        return None

    idx = torch.cuda.current_device()
    props = torch.cuda.get_device_properties(idx)
    return DeviceInfo(
        device_type='cuda',
        device_index=idx,
        name=props.name,
        memory_bytes=props.total_memory,
    )


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo for the host CPU."""
    processor = platform.processor()
    if not processor:
        processor = platform.machine() or "Unknown CPU"

    return DeviceInfo(device_type='cpu', device_index=None, name=processor)


def select_device(prefer: Literal['cpu', 'gpu', 'auto'] = 'auto') -> DeviceInfo:
    """
    Select compute device based on preference and availability.

    Args:
        prefer: Device preference
            - 'cpu': Always use CPU
            - 'gpu': Require a CUDA GPU (raises if unavailable)
            - 'auto': Use a CUDA GPU if available, else CPU

    Returns:
        DeviceInfo for selected device

    Raises:
        RuntimeError: If 'gpu' requested but no CUDA GPU available
    """
    if prefer == 'cpu':
        return get_cpu_info()

    gpu = detect_gpu()

    if prefer == 'gpu':
        if gpu is None:
            raise RuntimeError(
                "GPU requested but no CUDA device available. "
                "Ensure PyTorch is installed with CUDA support; "
                "float64 is required, so Apple MPS is not supported."
            )
        return gpu

    return gpu if gpu is not None else get_cpu_info()
