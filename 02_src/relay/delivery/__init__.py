"""Reply delivery: segmentation and paced sending."""

from .pacer import Pacer
from .segmenter import segment

__all__ = ["Pacer", "segment"]
