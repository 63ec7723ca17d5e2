from typing import Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from socialnet.core.errors import ValidationError

T = TypeVar("T", bound=BaseModel)


def violations_from(exc: PydanticValidationError) -> list:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "constraint": error["type"],
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


def validate(schema: Type[T], **data) -> T:
    """Build ``schema`` from ``data`` or raise a ValidationError listing every violated field."""
    try:
        return schema(**data)
    except PydanticValidationError as e:
        raise ValidationError(violations_from(e))
