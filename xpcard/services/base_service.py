# xpcard/services/base_service.py
from typing import Dict, Any, Optional, TypeVar, Generic
from dataclasses import dataclass, field
from abc import ABC
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')

@dataclass
class ServiceResult(Generic[T]):
    """Standardized service response format"""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def success_result(cls, data: T = None, metadata: Optional[Dict[str, Any]] = None) -> "ServiceResult[T]":
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(cls, error: str, metadata: Optional[Dict[str, Any]] = None) -> "ServiceResult[T]":
        """Create an error result"""
        return cls(success=False, error=error, metadata=metadata)

    @classmethod
    def validation_error(cls, field: str, issue: str) -> "ServiceResult[T]":
        """Create a validation error"""
        return cls(success=False, error=f"Validation failed for {field}: {issue}")

class BaseService(ABC):
    """Base service class with common patterns"""

    @staticmethod
    def _format_error(error: Exception, context: str = "") -> str:
        """Format user-friendly error messages"""
        error_msg = str(error)

        # Never expose internal errors to users
        if any(term in error_msg.lower() for term in [
            'traceback', 'exception', 'errno', 'pil', 'aiohttp',
            'clientconnector', 'cannot identify image', 'no such file'
        ]):
            return f"A system error occurred{f' during {context}' if context else ''}. Please try again."

        return error_msg

    @staticmethod
    def _validate_positive_int(value: Any, field_name: str) -> None:
        """Validate positive integer parameter"""
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"{field_name} must be a positive integer")

    @staticmethod
    def _validate_non_negative_int(value: Any, field_name: str) -> None:
        """Validate non-negative integer parameter"""
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError(f"{field_name} must be a non-negative integer")

    @staticmethod
    def _validate_int(value: Any, field_name: str) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{field_name} must be an integer")

    @staticmethod
    def _validate_string(value: Any, field_name: str, min_length: int = 1) -> None:
        """Validate string parameter"""
        if not isinstance(value, str) or len(value.strip()) < min_length:
            raise ValueError(f"{field_name} must be a valid string")

    @classmethod
    async def _safe_execute(cls, operation, description: str = "operation"):
        """Execute operation with standardized error handling"""
        try:
            result = await operation()
            return ServiceResult.success_result(result)
        except ValueError as e:
            return ServiceResult.error_result(str(e))
        except Exception as e:
            logger.error(f"{description} failed: {e}", exc_info=True)
            error_msg = cls._format_error(e, description)
            return ServiceResult.error_result(error_msg)
