from .model import (
    AttributeValue,
    Computed,
    Literal,
    Resource,
    ResourceRef,
    Unknown,
    VariableRef,
    parse_attribute,
)
from .resolver import resolve
from .variables import build_variable_table
from .walker import extract_resources, load_plan, parse_plan, root_module

__all__ = [
    "AttributeValue",
    "Computed",
    "Literal",
    "Resource",
    "ResourceRef",
    "Unknown",
    "VariableRef",
    "parse_attribute",
    "resolve",
    "build_variable_table",
    "extract_resources",
    "load_plan",
    "parse_plan",
    "root_module",
]
