"""
Configuration system for the Segmentation Engine.

Provides structured configuration using dataclasses with clear defaults,
type safety, and dict/environment based construction.
"""

from dataclasses import dataclass, fields
from typing import Optional, Dict, Any
import logging
import os

logger = logging.getLogger(__name__)

ENV_PREFIX = "SEGMENTER_"


@dataclass
class ProcessorOptions:
    """
    Base class for processor-specific configuration options.

    All processor option classes should inherit from this to provide
    consistent interface and common functionality.
    """
    enabled: bool = True
    timeout_seconds: Optional[int] = None  # Override engine timeout if set

    def validate(self) -> bool:
        """
        Validate configuration options.

        Returns:
            True if configuration is valid, False otherwise
        """
        if self.timeout_seconds is not None and self.timeout_seconds < 0:
            logger.error("timeout_seconds must be non-negative")
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> 'ProcessorOptions':
        """Create options from a dictionary, ignoring unknown keys with a warning."""
        valid_keys = {f.name for f in fields(cls)}
        filtered = {}
        for key, value in (options or {}).items():
            if key in valid_keys:
                filtered[key] = value
            else:
                logger.warning(f"Unknown {cls.__name__} key '{key}' will be ignored")
        return cls(**filtered)


@dataclass
class SegmentationOptions(ProcessorOptions):
    """
    Thresholds and style constants for geometric grouping.

    Distances are in page units (see EngineConfig.points_per_page_unit).
    """
    # Line grouping
    row_tie_tolerance: float = 0.5  # |dy| below this sorts by x instead of y
    line_break_threshold: float = 1.0  # |dy| above this starts a new line

    # Paragraph grouping
    paragraph_break_threshold: float = 2.0  # Line-to-line gap above this starts a paragraph

    # Run defaults
    default_font_size: float = 12.0

    # Style payload constants (not derived from the PDF)
    font_family: str = "Helvetica"
    color: str = "#000000"
    text_align: str = "left"
    line_height: float = 1.2

    def validate(self) -> bool:
        if not super().validate():
            return False

        if self.row_tie_tolerance < 0 or self.line_break_threshold < 0:
            logger.error("Line grouping thresholds must be non-negative")
            return False

        if self.paragraph_break_threshold < 0:
            logger.error("paragraph_break_threshold must be non-negative")
            return False

        if self.default_font_size <= 0:
            logger.error("default_font_size must be positive")
            return False

        if self.text_align not in ("left", "center", "right"):
            logger.error(f"Unsupported text_align '{self.text_align}'")
            return False

        return True


@dataclass
class FallbackOptions(ProcessorOptions):
    """
    Configuration options for the byte-level fallback extractor.
    """
    inflate_streams: bool = True  # Retry FlateDecode'd regions that show no text operators
    max_stream_bytes: int = 16 * 1024 * 1024  # Skip inflating regions larger than this

    def validate(self) -> bool:
        if not super().validate():
            return False

        if self.max_stream_bytes < 0:
            logger.error("max_stream_bytes must be non-negative")
            return False

        return True


@dataclass
class EngineConfig:
    """
    Central configuration for SegmentationEngine initialization.

    Example:
        >>> config = EngineConfig(parse_timeout_seconds=60)
        >>> engine = SegmentationEngine(config)
    """

    # Structural parser
    points_per_page_unit: float = 16.0  # A US-Letter page is 38.25 units wide
    parse_timeout_seconds: Optional[float] = 120.0  # None waits indefinitely

    # Processor-specific options (as dictionaries for flexibility)
    segmentation_options: Optional[Dict[str, Any]] = None
    fallback_options: Optional[Dict[str, Any]] = None

    # Validation
    max_file_size_mb: int = 100

    # Logging
    log_level: str = "INFO"

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all values are valid, False otherwise
        """
        if self.points_per_page_unit <= 0:
            logger.error("points_per_page_unit must be positive")
            return False

        if self.parse_timeout_seconds is not None and self.parse_timeout_seconds <= 0:
            logger.error("parse_timeout_seconds must be positive when set")
            return False

        if self.max_file_size_mb < 1:
            logger.error("max_file_size_mb must be at least 1 MB")
            return False

        if not self.get_segmentation_options().validate():
            return False

        if not self.get_fallback_options().validate():
            return False

        return True

    def get_segmentation_options(self) -> SegmentationOptions:
        """Resolve segmentation options from the stored dictionary."""
        return SegmentationOptions.from_dict(self.segmentation_options)

    def get_fallback_options(self) -> FallbackOptions:
        """Resolve fallback options from the stored dictionary."""
        return FallbackOptions.from_dict(self.fallback_options)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Useful for serialization, logging, and debugging.
        """
        return {
            'points_per_page_unit': self.points_per_page_unit,
            'parse_timeout_seconds': self.parse_timeout_seconds,
            'segmentation_options': self.get_segmentation_options().to_dict(),
            'fallback_options': self.get_fallback_options().to_dict(),
            'max_file_size_mb': self.max_file_size_mb,
            'log_level': self.log_level,
        }

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'EngineConfig':
        """
        Create EngineConfig from dictionary.

        Unknown keys are ignored with a warning.

        Args:
            config: Dictionary of configuration values

        Returns:
            EngineConfig instance
        """
        valid_keys = {f.name for f in fields(cls)}

        # Filter to valid keys and warn about unknown keys
        filtered_config = {}
        for key, value in config.items():
            if key in valid_keys:
                filtered_config[key] = value
            else:
                logger.warning(f"Unknown config key '{key}' will be ignored")

        return cls(**filtered_config)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'EngineConfig':
        """
        Create EngineConfig from SEGMENTER_* environment variables.

        Recognised variables:
            SEGMENTER_POINTS_PER_PAGE_UNIT, SEGMENTER_PARSE_TIMEOUT_SECONDS
            (0 or empty disables the timeout), SEGMENTER_MAX_FILE_SIZE_MB,
            SEGMENTER_INFLATE_STREAMS, LOG_LEVEL
        """
        env = os.environ if environ is None else environ
        config = cls()

        if env.get(f"{ENV_PREFIX}POINTS_PER_PAGE_UNIT"):
            config.points_per_page_unit = float(env[f"{ENV_PREFIX}POINTS_PER_PAGE_UNIT"])

        if f"{ENV_PREFIX}PARSE_TIMEOUT_SECONDS" in env:
            raw_timeout = env[f"{ENV_PREFIX}PARSE_TIMEOUT_SECONDS"].strip()
            timeout = float(raw_timeout) if raw_timeout else 0.0
            config.parse_timeout_seconds = timeout if timeout > 0 else None

        if env.get(f"{ENV_PREFIX}MAX_FILE_SIZE_MB"):
            config.max_file_size_mb = int(env[f"{ENV_PREFIX}MAX_FILE_SIZE_MB"])

        if env.get(f"{ENV_PREFIX}INFLATE_STREAMS"):
            inflate = env[f"{ENV_PREFIX}INFLATE_STREAMS"].strip().lower() in ("1", "true", "yes", "on")
            config.fallback_options = {'inflate_streams': inflate}

        config.log_level = env.get("LOG_LEVEL", config.log_level).upper()
        return config

    @classmethod
    def default(cls) -> 'EngineConfig':
        """Create configuration with default values."""
        return cls()

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"EngineConfig("
            f"unit={self.points_per_page_unit}pt, "
            f"timeout={self.parse_timeout_seconds}s, "
            f"max_size={self.max_file_size_mb}MB)"
        )
