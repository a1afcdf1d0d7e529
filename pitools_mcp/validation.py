"""Input validation shared by the tool handlers."""
from typing import Annotated, Any, Mapping, Type, TypeVar

import pydantic
from pydantic import AfterValidator, AnyUrl, StringConstraints, TypeAdapter

from .exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

_url_adapter = TypeAdapter(AnyUrl)


def _check_absolute_url(value: str) -> str:
    # Validate only; the caller's exact string is what gets sent upstream.
    try:
        _url_adapter.validate_python(value)
    except pydantic.ValidationError:
        raise ValueError(f"Invalid URL: {value!r}") from None
    return value


NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
UrlStr = Annotated[str, AfterValidator(_check_absolute_url)]


def validate_arguments(model: Type[ModelT], arguments: Any) -> ModelT:
    """Validate raw tool arguments against ``model``.

    Args:
        model: Pydantic model describing the tool input
        arguments: Raw, untyped arguments as received from the dispatcher

    Returns:
        The validated model instance

    Raises:
        ValidationError: With one ``(path, message)`` pair per violation
    """
    if not isinstance(arguments, Mapping):
        raise ValidationError([("<root>", "Arguments must be an object")])

    try:
        return model.model_validate(dict(arguments))
    except pydantic.ValidationError as e:
        raise ValidationError(
            (".".join(str(part) for part in error["loc"]) or "<root>", error["msg"])
            for error in e.errors()
        ) from e
