"""Animation adapters."""

from swipe_discovery.infrastructure.animation.frame_animator import FrameAnimator

__all__ = ["FrameAnimator"]
