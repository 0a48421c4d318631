from placeholder_dump.logging.structured_logger import StructuredLogger

__all__ = ["StructuredLogger"]
