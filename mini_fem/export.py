# mini_fem/export.py
"""
Export of a solved analysis: text report, JSON model, pandas tables.
"""

import json
from typing import Dict

import pandas as pd

from .analysis import SPARSE_THRESHOLD, AnalysisResult

_COORD_NAMES = ("x", "y", "z")


def dof_names(result: AnalysisResult):
    return result.family.dof_labels or tuple(
        f"u{i}" for i in range(result.dof.dof_per_node)
    )


def to_frames(result: AnalysisResult) -> Dict[str, pd.DataFrame]:
    """
    Node and element tables.

    Returns:
    --------
    {'nodes': DataFrame, 'elements': DataFrame}
        nodes    : node, coordinates, one column per DOF component
        elements : element, nodes, dofs, strain and stress components
    """
    names = dof_names(result)
    dim = result.mesh.dim

    node_rows = []
    for node in result.mesh.nodes:
        row = {"node": node.id}
        row.update(dict(zip(_COORD_NAMES[:dim], node.coords(dim))))
        row.update(dict(zip(names, result.node_displacement(node.id))))
        node_rows.append(row)

    element_rows = []
    for element, r in zip(result.mesh.elements, result.element_results):
        row = {
            "element": element.id,
            "nodes": list(element.nodes),
            "dofs": list(r.dofs),
        }
        row.update(dict(zip(result.family.strain_labels, r.strain)))
        row.update(dict(zip(result.family.stress_labels, r.stress)))
        element_rows.append(row)

    return {
        "nodes": pd.DataFrame(node_rows),
        "elements": pd.DataFrame(element_rows),
    }


def export_text(
    result: AnalysisResult,
    sparse: bool = False,
    threshold: float = SPARSE_THRESHOLD,
    precision: int = 4,
) -> str:
    """
    Plain-text report of the solved state.

    Sections: node displacements, element strain, element stress, global
    stiffness (dense rows, or only entries with |K| > threshold when
    sparse=True), non-zero force entries, element DOF connectivity.
    Every number uses scientific notation with `precision` digits.
    """
    fmt = f"{{:.{precision}e}}".format
    frames = to_frames(result)
    nodes = frames["nodes"]
    elements = frames["elements"]
    strain_cols = ["element", *result.family.strain_labels]
    stress_cols = ["element", *result.family.stress_labels]

    lines = ["==== Node Displacements ===="]
    lines.append(nodes.to_string(index=False, float_format=fmt))

    lines.append("")
    lines.append("==== Element Strain ====")
    lines.append(elements[strain_cols].to_string(index=False, float_format=fmt))

    lines.append("")
    lines.append("==== Element Stress ====")
    lines.append(elements[stress_cols].to_string(index=False, float_format=fmt))

    lines.append("")
    if sparse:
        lines.append(f"==== Global Stiffness Entries (|K| > {threshold:g}) ====")
        for i in range(result.ndof):
            for j in range(result.ndof):
                v = result.K[i, j]
                if abs(v) > threshold:
                    lines.append(f"K[{i}][{j}] = {fmt(v)}")
    else:
        lines.append("==== Global Stiffness Matrix ====")
        for row in result.K:
            lines.append("\t".join(fmt(v) for v in row))

    lines.append("")
    lines.append("==== Force Vector (non-zero) ====")
    for i, f in enumerate(result.F):
        if abs(f) > threshold:
            lines.append(f"F[{i}] = {fmt(f)}")

    lines.append("")
    lines.append("==== Element DOF Connectivity ====")
    for e in range(result.n_elements):
        dofs = ", ".join(str(i) for i in result.element_dofs(e))
        lines.append(f"Element {e}: DOFs = [{dofs}]")

    return "\n".join(lines) + "\n"


def export_json(result: AnalysisResult, indent: int = 2) -> str:
    """JSON model: parameters, summary, geometry and results."""
    dim = result.mesh.dim
    model = {
        "version": "1.0",
        "family": result.family.name,
        "parameters": result.config.model_dump(exclude_none=True),
        "summary": result.summary(),
        "geometry": {
            "nodes": [
                {"id": n.id, "coords": list(n.coords(dim))}
                for n in result.mesh.nodes
            ],
            "elements": [
                {"id": e.id, "nodes": list(e.nodes)} for e in result.mesh.elements
            ],
        },
        "results": {
            "displacements": [float(v) for v in result.d],
            "reactions": {str(k): v for k, v in result.reactions.items()},
            "elements": [
                {
                    "id": r.id,
                    "dofs": list(r.dofs),
                    "strain": [float(v) for v in r.strain],
                    "stress": [float(v) for v in r.stress],
                }
                for r in result.element_results
            ],
        },
    }
    return json.dumps(model, indent=indent)
