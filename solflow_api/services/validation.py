from typing import Any, List, Optional

from ..models.workflow import ValidationResult


def _ref(value: Any) -> Optional[Any]:
    # Only scalar ids can be referenced; anything else counts as missing.
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    return None


def validate_structure(nodes: Any, edges: Any) -> ValidationResult:
    """
    Check edge/node referential integrity of a graph.

    Pure function: never touches a store and never raises on malformed input.
    Errors are reported per dangling edge endpoint; an empty graph only
    produces a warning.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not isinstance(nodes, list):
        errors.append("nodes must be an array")
    if not isinstance(edges, list):
        errors.append("edges must be an array")

    if not errors:
        node_ids = {_ref(n.get("id")) for n in nodes if isinstance(n, dict)}
        node_ids.discard(None)

        for edge in edges:
            source = _ref(edge.get("source")) if isinstance(edge, dict) else None
            target = _ref(edge.get("target")) if isinstance(edge, dict) else None
            if source is None or source not in node_ids:
                errors.append(f"Edge references non-existent source node: {source}")
            if target is None or target not in node_ids:
                errors.append(f"Edge references non-existent target node: {target}")

        if not nodes:
            warnings.append("Workflow has no nodes")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
