from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from core.exceptions import MalformedResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_or_raise(data: Any, model_cls: type[ModelT], context: str = "") -> ModelT:
    """Validate a backend payload, turning schema errors into ``MalformedResponseError``."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        where = f" from {context}" if context else ""
        logger.error(f"Backend returned invalid {model_cls.__name__}{where}: {exc.error_count()} error(s)")
        raise MalformedResponseError(f"Invalid {model_cls.__name__} payload{where}", details=str(exc)) from exc
