"""
Shared building blocks for the taskhub services.

This module provides:
- Logging setup
- Event/error logging helpers
- The standard response envelope
- SQLAlchemy declarative base and engine/session factory
"""
import json
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logger = logging.getLogger("taskhub")

Base = declarative_base()


def configure_logging(level: str = "INFO") -> None:
    """Install the root log handler. Safe to call more than once."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for noisy in ("sqlalchemy.engine", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def create_session_factory(database_url: str) -> Tuple[AsyncEngine, async_sessionmaker]:
    """Create the async engine and the session factory bound to it."""
    engine = create_async_engine(database_url, echo=False, pool_pre_ping=True)
    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    return engine, session_factory


def status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


class ApiResponse(JSONResponse):
    """
    Standard response envelope for all API endpoints:
    {statusCode, statusMessage, data, error}
    """
    def __init__(self, data: Any = None, status_code: int = 200, error: Optional[str] = None, **kwargs):
        content = {
            "statusCode": status_code,
            "statusMessage": status_phrase(status_code),
            "data": data,
            "error": error,
        }
        super().__init__(content=content, status_code=status_code, **kwargs)


class BaseMicroservice:
    """
    Base class for the taskhub services. Provides:
    - A named logger
    - Structured event and error logging
    - Envelope responses
    """
    def __init__(self, service_name: str = "core"):
        self.service_name = service_name
        self.logger = logging.getLogger(f"taskhub.{service_name}")

    def log_event(self, event: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service_name,
            "event": event,
            "data": details or {},
        }
        self.logger.info(f"EVENT: {json.dumps(log_data, default=str)}")
        return log_data

    def log_error(self, error: Exception, context: str = "") -> Dict[str, Any]:
        error_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service_name,
            "error": str(error),
            "error_type": error.__class__.__name__,
            "context": context or "unknown",
        }
        self.logger.error(f"ERROR: {json.dumps(error_data, default=str)}")
        return error_data

    def response(self, data: Any = None, status_code: int = 200) -> ApiResponse:
        """Return a success envelope."""
        return ApiResponse(data=data, status_code=status_code)


class ApiModel(BaseModel):
    """Pydantic base for request/response bodies: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
