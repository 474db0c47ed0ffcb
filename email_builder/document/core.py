"""
Block dictionary, schema and dispatch builders.

A document is a flat mapping of block id to ``{"type": ..., "data": ...}``.
Block types are registered in a dictionary that pairs each type's data
schema with the component that renders it. The same schemas are shared by
the reader (static markup) and the editor dictionaries; only the
components differ.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Mapping, Type, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, create_model
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Annotated

from email_builder.core.exceptions import DocumentValidationError

logger = structlog.get_logger(__name__)

# component(block_id, data, ctx) -> markup
BlockComponent = Callable[[str, Any, Any], str]


@dataclass(frozen=True)
class BlockDefinition:
    schema: Type[BaseModel]
    component: BlockComponent
    # True for blocks whose ``props.url`` points at an XML feed
    fetches_xml: bool = False


BlockConfigurationDictionary = Dict[str, BlockDefinition]


class BaseBlock(BaseModel):
    """A validated block; concrete subclasses pin ``type`` and ``data``."""

    model_config = ConfigDict(extra="ignore")

    type: str
    data: Any


def build_block_configuration_dictionary(
    definitions: Mapping[str, BlockDefinition],
) -> BlockConfigurationDictionary:
    """Freeze a block dictionary, rejecting empty type names."""
    dictionary: BlockConfigurationDictionary = {}
    for name, definition in definitions.items():
        if not name:
            raise ValueError("Block type names must be non-empty")
        dictionary[name] = definition
    return dictionary


def _block_model(name: str, definition: BlockDefinition) -> Type[BaseBlock]:
    return create_model(
        f"{name}Block",
        __base__=BaseBlock,
        type=(Literal[name], ...),
        data=(definition.schema, ...),
    )


def _block_union(dictionary: BlockConfigurationDictionary):
    models = tuple(_block_model(name, definition) for name, definition in dictionary.items())
    if not models:
        raise ValueError("Block dictionary is empty")
    if len(models) == 1:
        return models[0]
    return Annotated[Union[models], Field(discriminator="type")]


def build_block_configuration_schema(dictionary: BlockConfigurationDictionary) -> TypeAdapter:
    """Validator for a single block, discriminated on ``type``."""
    return TypeAdapter(_block_union(dictionary))


def build_document_schema(dictionary: BlockConfigurationDictionary) -> TypeAdapter:
    """Validator for a whole document (block id -> block)."""
    return TypeAdapter(Dict[str, _block_union(dictionary)])


def validate_document(schema: TypeAdapter, document: Any) -> Dict[str, BaseBlock]:
    """
    Validate a raw document, raising ``DocumentValidationError`` on failure.

    Error locations are flattened to dotted paths rooted at the block id.
    """
    if not isinstance(document, Mapping):
        raise DocumentValidationError("Document must be a mapping of block id to block")
    try:
        return schema.validate_python(dict(document))
    except PydanticValidationError as exc:
        errors = [
            {
                "path": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
                "code": err["type"],
            }
            for err in exc.errors()
        ]
        logger.warning("Document failed validation", error_count=len(errors))
        raise DocumentValidationError(
            f"Document failed validation with {len(errors)} error(s)", errors=errors
        ) from exc


def build_block_component(dictionary: BlockConfigurationDictionary) -> BlockComponent:
    """Dispatcher that renders a validated block with its registered component."""

    def render(block_id: str, block: BaseBlock, ctx: Any) -> str:
        definition = dictionary.get(block.type)
        if definition is None:
            logger.warning("No component registered for block type", block_type=block.type)
            return ""
        return definition.component(block_id, block.data, ctx)

    return render
