"""
Shared compute infrastructure for gravitree.

This module provides hardware detection, timing utilities, precision
helpers and tolerance tiers shared by the domain backends.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
    precision: Machine epsilon and condition numbers
    tolerances: Tolerance tiers and numeric thresholds
"""

from gravitree.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from gravitree.core.compute.timing import Timer

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
]
