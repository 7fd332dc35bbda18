"""
Real-time drivers that sit outside the virtual-time engine.
"""

from __future__ import annotations

from .frames import FrameClock, FrameTick

__all__ = ["FrameClock", "FrameTick"]
