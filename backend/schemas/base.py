from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase on the wire."""
    # NaN and infinity are rejected for every float field
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True, allow_inf_nan=False)


def check_choice(value, enum_cls, message: str):
    if isinstance(value, enum_cls):
        return value
    if value not in {member.value for member in enum_cls}:
        raise ValueError(message)
    return value


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value
