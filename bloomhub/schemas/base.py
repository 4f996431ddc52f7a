# bloomhub/schemas/base.py
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for API payloads.

    JSON uses camelCase (`firstName`), Python uses snake_case. Input is
    accepted in either form; responses are rendered by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def missing_fields(payload: BaseModel, names: tuple[str, ...]) -> list[str]:
    """
    Return the camelCase names of required fields that are absent or blank.

    Used instead of schema-level `required` so that missing input is a
    400 with a stable message rather than a 422 validation dump.
    """
    missing = []
    for name in names:
        value = getattr(payload, name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(to_camel(name))
    return missing


def is_valid_email(value: str) -> bool:
    """Syntax check only; no DNS lookup."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
