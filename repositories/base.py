# ============================================================================
# BASE REPOSITORY - ERROR HANDLING PATTERNS
# ============================================================================
# STATUS: Repositories - Base repository patterns
# PURPOSE: Common error handling and logging for catalog repositories
# CREATED: 18 OCT 2026
# ============================================================================
"""
Base Repository Patterns

Abstract base class that provides common infrastructure for repositories:
- Consistent error handling with context managers
- Standardized logging

Storage-specific repositories extend this with their queries.
"""

import logging
from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Optional, Type

from core.errors import RepositoryError

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Abstract base repository with common patterns.

    Provides:
    - Error context manager for consistent error handling
    - Standardized logging

    Subclasses implement storage-specific operations.
    """

    error_class: Type[RepositoryError] = RepositoryError

    def __init__(self):
        """Initialize base repository."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.debug(f"{self.__class__.__name__} initialized")

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None):
        """
        Context manager for consistent error handling.

        All exceptions are logged with context and re-raised as
        error_class, chained to the original.

        Args:
            operation: Human-readable description of the operation
            entity_id: Optional entity name for context

        Example:
            with self._error_context("column listing", table_name):
                rows = self.session.fetch_all(SQL, (table_name,))
        """
        try:
            yield
        except RepositoryError:
            # Already has context, just re-raise
            raise
        except Exception as e:
            error_msg = f"{operation} failed"
            if entity_id:
                error_msg += f" for {entity_id}"
            error_msg += f": {e}"
            self.logger.error(error_msg)
            raise self.error_class(error_msg, operation=operation, entity_id=entity_id) from e

    def _log_operation(
        self,
        operation: str,
        count: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log operation result with consistent formatting.

        Format:
            "operation: count | details"
        """
        msg = f"{operation}: {count}"
        if details:
            msg += f" | {details}"
        self.logger.info(msg)


__all__ = ["BaseRepository"]
