import pydantic
import pydantic_core

__all__ = ("convert_errors",)


CUSTOM_TYPES = {
    "dict_type": "mapping_type",
    "model_attributes_type": "mapping_type",
    "list_type": "sequence_type",
    "tuple_type": "sequence_type",
    "bool_type": "setting_type",
    "int_type": "setting_type",
    "unexpected_keyword_argument": "extra_field",
}
CUSTOM_MESSAGES = {
    # https://docs.pydantic.dev/latest/errors/validation_errors/
    "extra_field": "Extra fields not allowed",
    "missing": "Field is required",
    "mapping_type": "Input must be a valid mapping",
    "sequence_type": "Input must be a valid sequence",
    "setting_type": "Input must be a boolean or a non-negative integer",
    "greater_than_equal": "Input must be greater than or equal to {ge}",
}


def convert_errors(
    ex: pydantic.ValidationError,
    custom_messages: dict[str, str] = CUSTOM_MESSAGES,
    custom_types: dict[str, str] = CUSTOM_TYPES,
) -> list[pydantic_core.ErrorDetails]:
    new_errors: list[pydantic_core.ErrorDetails] = []

    for error in ex.errors(include_url=False):
        ctx = error.get("ctx")

        # A union of strict types reports the failing member as the first location
        # item, e.g. ('bool',) or ('int',), which means nothing to the user.
        if error["loc"] and error["loc"][0] in ("bool", "int", "constrained-int"):
            error["loc"] = error["loc"][1:]

        if custom_type := custom_types.get(error["type"]):
            error["type"] = custom_type

        if custom_message := custom_messages.get(error["type"]):
            error["msg"] = custom_message.format(**ctx) if ctx else custom_message

        if ctx:
            # we don't want to show the context to the user
            del error["ctx"]

        new_errors.append(error)

    return new_errors
