from typing import Annotated

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel

from ..util.keys import is_valid_public_key

_url_adapter = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        _url_adapter.validate_python(value)
    except ValueError:
        raise ValueError("must be a valid URL")
    return value


def _check_public_key(value: str) -> str:
    if not is_valid_public_key(value):
        raise ValueError(f"Invalid public key: {value}")
    return value


Url = Annotated[str, AfterValidator(_check_url)]
PublicKey = Annotated[str, AfterValidator(_check_public_key)]


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (rpcEndpoint, createdAt, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
