"""CRD generation from pydantic models."""

import logging

from .definition import CRDDefinition, CRDOwner
from .registry import CRDRegistry

logger = logging.getLogger(__name__)

PRESERVE_UNKNOWN = "x-kubernetes-preserve-unknown-fields"


class OpenAPIConverter:
    """Convert pydantic schemas to OpenAPI v3 compatible schemas for CRDs."""

    @staticmethod
    def convert_schema(pydantic_schema):
        """Convert pydantic JSON schema to a structural OpenAPI v3 schema."""
        openapi_schema = {"type": "object"}

        if "properties" in pydantic_schema:
            openapi_schema["properties"] = OpenAPIConverter._convert_properties(
                pydantic_schema["properties"], pydantic_schema.get("$defs", {})
            )

        if "required" in pydantic_schema:
            openapi_schema["required"] = pydantic_schema["required"]

        return openapi_schema

    @staticmethod
    def _convert_properties(properties, property_defs):
        """Convert properties recursively."""
        converted = {}

        for prop_name, prop_schema in properties.items():
            converted[prop_name] = OpenAPIConverter._convert_property(
                prop_schema, property_defs
            )

        return converted

    @staticmethod
    def _convert_property(prop_schema, defs):
        """Convert a single property schema."""
        # $ref to a model definition
        if "$ref" in prop_schema:
            def_name = prop_schema["$ref"].replace("#/$defs/", "")
            if def_name not in defs:
                raise ValueError(f"Unresolved schema reference {prop_schema['$ref']}")
            converted = OpenAPIConverter._convert_property(defs[def_name], defs)
            return OpenAPIConverter._with_annotations(converted, prop_schema)

        # Field metadata on a model reference may wrap it in allOf
        if "allOf" in prop_schema and len(prop_schema["allOf"]) == 1:
            converted = OpenAPIConverter._convert_property(prop_schema["allOf"][0], defs)
            return OpenAPIConverter._with_annotations(converted, prop_schema)

        # Optional[X] is rendered by pydantic as anyOf [X, null]
        if "anyOf" in prop_schema:
            options = [o for o in prop_schema["anyOf"] if o.get("type") != "null"]
            if len(options) == 1:
                converted = OpenAPIConverter._convert_property(options[0], defs)
            else:
                converted = {PRESERVE_UNKNOWN: True}
            if len(options) != len(prop_schema["anyOf"]):
                converted["nullable"] = True
            return OpenAPIConverter._with_annotations(converted, prop_schema)

        if prop_schema.get("type") == "array":
            converted = {"type": "array"}
            if "items" in prop_schema:
                converted["items"] = OpenAPIConverter._convert_property(
                    prop_schema["items"], defs
                )
            return OpenAPIConverter._with_annotations(converted, prop_schema)

        if prop_schema.get("type") == "object" or "properties" in prop_schema:
            converted = {"type": "object"}
            if "properties" in prop_schema:
                converted["properties"] = OpenAPIConverter._convert_properties(
                    prop_schema["properties"], defs
                )
                if "required" in prop_schema:
                    converted["required"] = prop_schema["required"]
            else:
                additional = prop_schema.get("additionalProperties", True)
                if isinstance(additional, dict) and additional:
                    converted["additionalProperties"] = (
                        OpenAPIConverter._convert_property(additional, defs)
                    )
                else:
                    # Free-form maps such as Helm values
                    converted[PRESERVE_UNKNOWN] = True
            return OpenAPIConverter._with_annotations(converted, prop_schema)

        result = {}
        if "type" in prop_schema:
            result["type"] = prop_schema["type"]
        if "format" in prop_schema:
            result["format"] = prop_schema["format"]
        if "enum" in prop_schema:
            result["enum"] = prop_schema["enum"]

        # No type means Any
        if not result.get("type"):
            result[PRESERVE_UNKNOWN] = True

        return OpenAPIConverter._with_annotations(result, prop_schema)

    @staticmethod
    def _with_annotations(converted, prop_schema):
        if "description" in prop_schema:
            converted["description"] = prop_schema["description"]
        if "default" in prop_schema and prop_schema["default"] is not None:
            converted["default"] = prop_schema["default"]
        return converted


def build_definition(model_info, converter=None):
    """Build a CRDDefinition from registered model info.

    Schema generation failures are programming errors and are raised as-is.
    """
    converter = converter or OpenAPIConverter()
    spec_schema = converter.convert_schema(model_info["model"].model_json_schema())

    status_schema = None
    if model_info["status"] is not None:
        status_schema = converter.convert_schema(
            model_info["status"].model_json_schema()
        )

    return CRDDefinition(
        group=model_info["group"],
        version=model_info["version"],
        kind=model_info["kind"],
        plural=model_info["plural"],
        singular=model_info["singular"],
        scope=model_info["scope"],
        owner=model_info["owner"],
        spec_schema=spec_schema,
        status_schema=status_schema,
        columns=model_info["columns"],
    )


def list_crds():
    """Return the CRDs this operator installs and the CRDs it depends on.

    Returns:
        tuple: (operator CRDs, helm-locker CRDs, helm-controller CRDs)
    """
    registry = CRDRegistry()
    registry.discover_models()
    converter = OpenAPIConverter()

    groups = {owner: [] for owner in CRDOwner}
    for model_info in registry.get_all_models().values():
        groups[model_info["owner"]].append(build_definition(model_info, converter))

    return (
        groups[CRDOwner.OPERATOR],
        groups[CRDOwner.HELM_LOCKER],
        groups[CRDOwner.HELM_CONTROLLER],
    )


def manifests(catalog=list_crds):
    """Return the CustomResourceDefinition manifests for every CRD group."""
    return tuple(
        [definition.to_manifest() for definition in group] for group in catalog()
    )
