"""
Document Segmentation Engine

Configuration and processor plumbing for the segmentation pipeline.
The coordinator itself lives in engine.segmentation_engine and is imported
from there, since it depends on the processors package.
"""

__version__ = "1.0.0"

from engine.config import EngineConfig, ProcessorOptions, SegmentationOptions, FallbackOptions
from engine.base_processor import BaseProcessor, ProcessorRegistry

__all__ = [
    'EngineConfig',
    'ProcessorOptions',
    'SegmentationOptions',
    'FallbackOptions',
    'BaseProcessor',
    'ProcessorRegistry',
]
