"""
Diagram Validator - checks Stage-1 candidates before they reach the renderer.

Catches issues like:
- Missing nodes
- Duplicate or unusable node IDs
- Edges pointing at nodes that do not exist
- Empty labels / titles
- Orphaned nodes, self-loops, duplicate edges
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set, Tuple
from collections import defaultdict

from pydantic import ValidationError as SchemaError

from flowgen.ir.diagram import DiagramSpec
from flowgen.ir.errors import ValidationIssue, ValidationSeverity
from flowgen.ir.validation import ValidationResult
from flowgen.llm.parser import MERMAID_RESERVED

logger = logging.getLogger(__name__)

VALID_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class DiagramValidationResult:
    """Result of validating one parsed DiagramSpec"""
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.INFO)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }

    def get_summary(self) -> str:
        status = "valid" if self.is_valid else "invalid"
        return (
            f"{status} | "
            f"Errors: {self.error_count}, Warnings: {self.warning_count}, Info: {self.info_count}"
        )


class DiagramValidator:
    """
    Validates DiagramSpecs for structural correctness.

    Usage:
        validator = DiagramValidator()
        result = validator.validate(spec)

        if not result.is_valid:
            for issue in result.issues:
                print(f"[{issue.severity.value}] {issue.message}")
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def validate(self, diagram: DiagramSpec) -> DiagramValidationResult:
        issues: List[ValidationIssue] = []
        node_ids = {node.id for node in diagram.nodes}

        issues.extend(self._check_empty_diagram(diagram))
        issues.extend(self._check_title(diagram))
        issues.extend(self._check_node_ids(diagram))
        issues.extend(self._check_duplicate_node_ids(diagram))
        issues.extend(self._check_empty_labels(diagram))
        issues.extend(self._check_missing_edge_references(diagram, node_ids))
        issues.extend(self._check_orphaned_nodes(diagram, node_ids))
        issues.extend(self._check_self_loops(diagram))
        issues.extend(self._check_duplicate_edges(diagram))

        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        has_warnings = any(i.severity == ValidationSeverity.WARNING for i in issues)

        is_valid = not has_errors
        if self.strict_mode:
            is_valid = not has_errors and not has_warnings

        return DiagramValidationResult(
            is_valid=is_valid,
            issues=issues,
            stats={"nodes": len(diagram.nodes), "edges": len(diagram.edges)},
        )

    def _check_empty_diagram(self, diagram: DiagramSpec) -> List[ValidationIssue]:
        if diagram.nodes:
            return []
        return [ValidationIssue(
            severity=ValidationSeverity.ERROR,
            code="NO_NODES",
            message="Diagram has no nodes",
            suggestion="Every diagram needs at least one node",
        )]

    def _check_title(self, diagram: DiagramSpec) -> List[ValidationIssue]:
        if diagram.title and diagram.title.strip():
            return []
        return [ValidationIssue(
            severity=ValidationSeverity.WARNING,
            code="EMPTY_TITLE",
            message="Diagram has no title",
        )]

    def _check_node_ids(self, diagram: DiagramSpec) -> List[ValidationIssue]:
        issues = []
        for node in diagram.nodes:
            if not VALID_ID_RE.match(node.id):
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="INVALID_NODE_ID",
                    message=f"Node id '{node.id}' is not a usable Mermaid identifier",
                    node_id=node.id,
                    suggestion="Use letters, digits and underscores only",
                ))
            elif node.id.lower() in MERMAID_RESERVED:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="INVALID_NODE_ID",
                    message=f"Node id '{node.id}' is a Mermaid keyword",
                    node_id=node.id,
                    suggestion=f"Rename it, e.g. '{node.id}_node'",
                ))
        return issues

    def _check_duplicate_node_ids(self, diagram: DiagramSpec) -> List[ValidationIssue]:
        issues = []
        seen_ids: Dict[str, int] = defaultdict(int)
        for node in diagram.nodes:
            seen_ids[node.id] += 1
        for node_id, count in seen_ids.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DUPLICATE_NODE_ID",
                    message=f"Duplicate node ID '{node_id}' appears {count} times",
                    node_id=node_id,
                    suggestion="Ensure each node has a unique ID",
                ))
        return issues

    def _check_empty_labels(self, diagram: DiagramSpec) -> List[ValidationIssue]:
        issues = []
        for node in diagram.nodes:
            if not node.label or not node.label.strip():
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EMPTY_LABEL",
                    message=f"Node '{node.id}' has empty label",
                    node_id=node.id,
                    suggestion="The node id will be shown instead",
                ))
        return issues

    def _check_missing_edge_references(self, diagram: DiagramSpec, node_ids: Set[str]) -> List[ValidationIssue]:
        issues = []
        for edge in diagram.edges:
            if edge.source not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_SOURCE_NODE",
                    message=f"Edge references non-existent source node '{edge.source}'",
                    edge_info=f"{edge.source} -> {edge.target}",
                    suggestion=f"Add node '{edge.source}' or fix the edge reference",
                ))
            if edge.target not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_TARGET_NODE",
                    message=f"Edge references non-existent target node '{edge.target}'",
                    edge_info=f"{edge.source} -> {edge.target}",
                    suggestion=f"Add node '{edge.target}' or fix the edge reference",
                ))
        return issues

    def _check_orphaned_nodes(self, diagram: DiagramSpec, node_ids: Set[str]) -> List[ValidationIssue]:
        # a lone node is a legitimate (if dull) diagram
        if len(diagram.nodes) < 2:
            return []

        connected: Set[str] = set()
        for edge in diagram.edges:
            connected.add(edge.source)
            connected.add(edge.target)

        issues = []
        for node in diagram.nodes:
            if node.id not in connected:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="ORPHANED_NODE",
                    message=f"Node '{node.label}' ({node.id}) has no connections",
                    node_id=node.id,
                ))
        return issues

    def _check_self_loops(self, diagram: DiagramSpec) -> List[ValidationIssue]:
        issues = []
        for edge in diagram.edges:
            if edge.source == edge.target:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.INFO,
                    code="SELF_LOOP",
                    message=f"Edge creates self-loop on node '{edge.source}'",
                    node_id=edge.source,
                    edge_info=f"{edge.source} -> {edge.target}",
                ))
        return issues

    def _check_duplicate_edges(self, diagram: DiagramSpec) -> List[ValidationIssue]:
        issues = []
        edge_counts: Dict[Tuple[str, str, str], int] = defaultdict(int)
        for edge in diagram.edges:
            edge_counts[(edge.source, edge.target, edge.label or "")] += 1
        for (source, target, label), count in edge_counts.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.INFO,
                    code="DUPLICATE_EDGE",
                    message=f"Duplicate edge '{source}' -> '{target}' ({label}) appears {count} times",
                    edge_info=f"{source} -> {target}",
                ))
        return issues


def _schema_issues(exc: SchemaError) -> List[ValidationIssue]:
    issues = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()))
        issues.append(ValidationIssue(
            severity=ValidationSeverity.ERROR,
            code="SCHEMA_MISMATCH",
            message=f"{location or 'diagram'}: {err.get('msg')}",
        ))
    return issues


def validate_candidate(candidate: Any, index: int = 0, validator: DiagramValidator = None) -> ValidationResult:
    """Schema-check a raw candidate, then run the structural checks."""
    validator = validator or DiagramValidator()

    if isinstance(candidate, DiagramSpec):
        spec = candidate
    else:
        try:
            spec = DiagramSpec.model_validate(candidate)
        except SchemaError as e:
            return ValidationResult.failure(_schema_issues(e), index=index)

    result = validator.validate(spec)
    if result.is_valid:
        return ValidationResult.success(spec, result.issues, index=index)
    return ValidationResult.failure(result.issues, index=index)


def validate_diagram_specs(candidates: List[Any], strict: bool = False) -> List[ValidationResult]:
    """One ValidationResult per candidate, in input order."""
    validator = DiagramValidator(strict_mode=strict)
    results = []
    for index, candidate in enumerate(candidates):
        result = validate_candidate(candidate, index=index, validator=validator)
        if not result.is_valid:
            logger.warning(
                "[VALIDATOR] candidate %d rejected: %s",
                index, ", ".join(i.code for i in result.errors) or "strict mode",
            )
        results.append(result)
    return results
