"""
Base processor and registry.

Defines the interface that all processors implement for integration with
the SegmentationEngine, and the registry the engine uses to manage them.
"""

from abc import ABC
from typing import Dict, List, Optional, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from engine.segmentation_engine import SegmentationEngine

logger = logging.getLogger(__name__)


class BaseProcessor(ABC):
    """
    Abstract base class for all segmentation processors.

    Processors receive a SegmentationEngine reference to access shared
    configuration and must be initialized before use. They hold no
    per-document state: every extraction call owns its own buffers.
    """

    def __init__(self, engine: 'SegmentationEngine'):
        """
        Initialize processor with engine reference.

        Args:
            engine: SegmentationEngine instance that owns this processor
        """
        self.engine = engine
        self._initialized = False
        logger.debug(f"{self.__class__.__name__} created with engine reference")

    def initialize(self) -> None:
        """
        Initialize processor-specific resources.

        Called by the engine after processor creation but before use.
        """
        if self._initialized:
            logger.warning(f"{self.__class__.__name__} already initialized")
            return

        self._initialized = True
        logger.debug(f"{self.__class__.__name__} initialized")

    def cleanup(self) -> None:
        """
        Clean up processor-specific resources.

        Idempotent: safe to call multiple times.
        """
        if not self._initialized:
            return

        self._initialized = False
        logger.debug(f"{self.__class__.__name__} cleaned up")

    @property
    def is_initialized(self) -> bool:
        """Check if processor has been initialized."""
        return self._initialized

    def validate_state(self) -> bool:
        """
        Validate that processor is in a valid state for operations.

        Returns:
            True if processor is ready, False otherwise
        """
        if not self._initialized:
            logger.error(f"{self.__class__.__name__} not initialized")
            return False

        if self.engine is None:
            logger.error(f"{self.__class__.__name__} has no engine reference")
            return False

        return True

    def __repr__(self) -> str:
        """String representation for debugging."""
        status = "initialized" if self._initialized else "not initialized"
        return f"{self.__class__.__name__}({status})"


class ProcessorRegistry:
    """
    Named processors of one engine, kept in registration order.

    Initialization runs in that order and cleanup in reverse, so a processor
    may rely on the ones registered before it.
    """

    def __init__(self):
        self._processors: Dict[str, BaseProcessor] = {}

    def register(self, name: str, processor: BaseProcessor) -> None:
        if name in self._processors:
            logger.warning(f"Processor '{name}' already registered, replacing")
            del self._processors[name]
        self._processors[name] = processor
        logger.debug(f"Registered processor: {name}")

    def get(self, name: str) -> Optional[BaseProcessor]:
        return self._processors.get(name)

    def initialize_all(self) -> None:
        """Initialize every processor; the first failure aborts engine construction."""
        for name, processor in self._processors.items():
            try:
                processor.initialize()
            except Exception as e:
                logger.error(f"Failed to initialize processor '{name}': {e}")
                raise

    def cleanup_all(self) -> None:
        """Clean up in reverse order, continuing past individual failures."""
        for name, processor in reversed(list(self._processors.items())):
            try:
                processor.cleanup()
            except Exception as e:
                logger.warning(f"Error cleaning up processor '{name}': {e}")

    def validate_all(self) -> bool:
        invalid = [name for name, processor in self._processors.items() if not processor.validate_state()]
        for name in invalid:
            logger.error(f"Processor '{name}' in invalid state")
        return not invalid

    @property
    def processor_names(self) -> List[str]:
        return list(self._processors)

    def __repr__(self) -> str:
        return f"ProcessorRegistry({self.processor_names})"
