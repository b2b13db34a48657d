"""OpenAPI translation for route tables.

``OpenAPITranslator.translate(table)`` renders the ordered templates as an
OpenAPI ``paths`` object. Each route token becomes a path parameter whose
schema comes from pydantic and whose ``pattern`` is the token constraint.

Verbs: routes without an explicit verb set are published as ``get``.
Templates sharing a path (overloads split by verb) merge into one path
item; the first template wins for a repeated verb.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from pydantic import PydanticUserError, TypeAdapter

if TYPE_CHECKING:
    from code_routes.core.builder import RouteTemplate
    from code_routes.core.model import RouteParameter
    from code_routes.core.table import RouteTable

__all__ = ["OpenAPITranslator"]


class OpenAPITranslator:
    """Static helpers converting a route table to OpenAPI."""

    @staticmethod
    def translate(table: RouteTable) -> dict[str, Any]:
        """Return ``{"paths": {...}}`` for every template of ``table``."""
        paths: dict[str, Any] = {}
        for template in table.templates:
            path = OpenAPITranslator.openapi_path(template)
            path_item = paths.setdefault(path, {})
            for method, operation in OpenAPITranslator.template_to_operations(template).items():
                path_item.setdefault(method, operation)
        return {"paths": paths}

    @staticmethod
    def openapi_path(template: RouteTemplate) -> str:
        return "/" + template.template.replace("{*", "{")

    @staticmethod
    def template_to_operations(template: RouteTemplate) -> dict[str, Any]:
        action = template.action
        doc = inspect.getdoc(action.func) or ""
        operation: dict[str, Any] = {
            "operationId": template.name,
            "summary": doc.split("\n")[0] if doc else action.name,
        }
        if doc:
            operation["description"] = doc
        parameters = [OpenAPITranslator.token_to_parameter(token) for token in template.tokens]
        if parameters:
            operation["parameters"] = parameters
        operation["responses"] = {"200": {"description": "Successful response"}}
        methods = sorted(verb.lower() for verb in template.verbs) if template.verbs else ["get"]
        return {method: dict(operation) for method in methods}

    @staticmethod
    def token_to_parameter(token: RouteParameter) -> dict[str, Any]:
        schema = OpenAPITranslator.python_type_to_openapi_schema(token.parameter_type)
        if token.constraint:
            schema["pattern"] = f"^(?:{token.constraint})$"
        return {
            "name": token.name,
            "in": "path",
            "required": True,
            "schema": schema,
        }

    @staticmethod
    def python_type_to_openapi_schema(python_type: Any) -> dict[str, Any]:
        """Convert a Python type to a JSON schema dict using pydantic."""
        try:
            return TypeAdapter(python_type).json_schema()
        except (PydanticUserError, TypeError):
            return {"type": "string"}
