"""Declarative tool parameter schemas.

Parameters are declared as pydantic models deriving from ``ToolParameters``.
``ParameterSchema`` is what the rest of the server sees: it validates raw
argument mappings and reports failures as plain ``FieldViolation`` records.
"""

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from tl.ado_tools_server.errors import FieldViolation, InvalidArgumentsError
from typing import Any, Dict, List, Mapping, Optional, Type


class ToolParameters(BaseModel):
    """Base class for tool parameter models.

    Fields are snake_case in Python and camelCase on the wire. Values are not
    coerced between types, and unknown keys are ignored.
    """

    model_config = ConfigDict(
        strict=True,
        extra='ignore',
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _violations(error: ValidationError) -> List[FieldViolation]:
    violations = []
    for item in error.errors():
        field = '.'.join(str(part) for part in item.get('loc', ())) or '<arguments>'
        violations.append(FieldViolation(field=field, message=item['msg'], kind=item['type']))
    return violations


class ParameterSchema:
    """Validator for the parameters of one tool."""

    def __init__(self, model: Type[ToolParameters]) -> None:
        self.model = model

    def json_schema(self) -> Dict[str, Any]:
        """JSON schema advertised to MCP clients."""
        return self.model.model_json_schema(by_alias=True)

    def validate(self, tool_name: str, arguments: Optional[Mapping[str, Any]]) -> ToolParameters:
        """Validate raw arguments.

        Args:
            tool_name: Tool name reported in the error
            arguments: Raw arguments as received from the caller

        Returns:
            The validated parameter model, with defaults applied

        Raises:
            InvalidArgumentsError: With one violation per offending field
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentsError(
                tool_name,
                [FieldViolation('<arguments>', 'Arguments must be an object', 'dict_type')],
            )
        try:
            return self.model.model_validate(dict(arguments))
        except ValidationError as e:
            raise InvalidArgumentsError(tool_name, _violations(e)) from None
