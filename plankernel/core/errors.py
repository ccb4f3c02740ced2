"""Hard failures raised by the kernel.

Soft, still-drawable problems are returned as ``ConstructionIssue`` or
``PartIssue`` values instead.
"""

from __future__ import annotations


class KernelError(ValueError):
    """Base class: the model is in a state the kernel cannot process."""


class SegmentationError(KernelError):
    """Openings overflow the wall or overlap each other."""


class InvalidPerimeterError(KernelError):
    """Perimeter input is inconsistent or too small to construct."""
