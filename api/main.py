# api/main.py
"""
FastAPI backend for mini_fem - exposes the analysis pipeline as REST API.
"""

from dataclasses import asdict
from typing import Dict, List, Optional, Any
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from mini_fem import (
    AnalysisConfig,
    AnalysisResult,
    FAMILIES,
    FEMError,
    SingularSystemError,
    build_analysis,
    export_json as model_json,
    export_text as report_text,
)
from mini_fem.analysis import build_mesh
from mini_fem.config import FAMILY_DEFAULTS


logger = logging.getLogger(__name__)

app = FastAPI(
    title="mini_fem API",
    description="Finite-element assembly and solve engine",
    version="0.1.0"
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Response Models
# =============================================================================

class NodeData(BaseModel):
    """Node geometry and displacement."""
    id: int
    coords: List[float]
    displacement: Optional[List[float]] = None


class ElementData(BaseModel):
    """Element connectivity and recovered quantities."""
    id: int
    nodes: List[int]
    dofs: Optional[List[int]] = None
    strain: Optional[List[float]] = None
    stress: Optional[List[float]] = None


class SummaryData(BaseModel):
    """Size and headline numbers of a solved analysis."""
    family: str
    n_nodes: int
    n_elements: int
    ndof: int
    n_fixed_dofs: int
    penalty: float
    max_displacement: float


class AnalysisResponse(BaseModel):
    """Complete analysis result."""
    success: bool
    error: Optional[str] = None
    summary: Optional[SummaryData] = None
    nodes: Optional[List[NodeData]] = None
    elements: Optional[List[ElementData]] = None
    reactions: Optional[Dict[str, float]] = None
    params: Optional[Dict[str, Any]] = None


class FamilyInfo(BaseModel):
    """Element family description and preset scenario."""
    name: str
    dim: int
    dof_per_node: int
    nodes_per_element: int
    dof_labels: List[str]
    strain_labels: List[str]
    stress_labels: List[str]
    defaults: Dict[str, Any]


# =============================================================================
# Analysis
# =============================================================================

def _geometry_only(config: AnalysisConfig) -> AnalysisResponse:
    """Mesh of a configuration whose solve failed, if the mesh itself is valid."""
    try:
        mesh = build_mesh(config)
    except FEMError:
        return AnalysisResponse(success=False, params=config.model_dump(exclude_none=True))
    return AnalysisResponse(
        success=False,
        nodes=[NodeData(id=n.id, coords=list(n.coords(mesh.dim))) for n in mesh.nodes],
        elements=[ElementData(id=e.id, nodes=list(e.nodes)) for e in mesh.elements],
        params=config.model_dump(exclude_none=True),
    )


def to_response(result: AnalysisResult) -> AnalysisResponse:
    dim = result.mesh.dim
    nodes_list = [
        NodeData(
            id=n.id,
            coords=list(n.coords(dim)),
            displacement=[float(v) for v in result.node_displacement(n.id)],
        )
        for n in result.mesh.nodes
    ]
    elements_list = [
        ElementData(
            id=e.id,
            nodes=list(e.nodes),
            dofs=list(r.dofs),
            strain=[float(v) for v in r.strain],
            stress=[float(v) for v in r.stress],
        )
        for e, r in zip(result.mesh.elements, result.element_results)
    ]
    return AnalysisResponse(
        success=True,
        summary=SummaryData(**result.summary()),
        nodes=nodes_list,
        elements=elements_list,
        reactions={str(k): v for k, v in result.reactions.items()},
        params=result.config.model_dump(exclude_none=True),
    )


def analyze_config(config: AnalysisConfig) -> AnalysisResponse:
    """Run the analysis. Returns the mesh even if the solve fails."""
    try:
        result = build_analysis(config)
    except SingularSystemError as e:
        logger.info("Analysis of %s rejected: %s", config.family, e)
        response = _geometry_only(config)
        response.error = f"Structure unstable: {e}"
        return response
    except FEMError as e:
        logger.info("Analysis of %s failed: %s", config.family, e)
        response = _geometry_only(config)
        response.error = f"Analysis failed: {e}"
        return response
    return to_response(result)


def _solve_or_400(config: AnalysisConfig) -> AnalysisResult:
    try:
        return build_analysis(config)
    except FEMError as e:
        raise HTTPException(status_code=400, detail=str(e))


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": "mini_fem API"}


@app.get("/api/families", response_model=List[FamilyInfo])
async def list_families():
    """Available element families with their preset scenarios."""
    return [
        FamilyInfo(
            name=f.name,
            dim=f.dim,
            dof_per_node=f.dof_per_node,
            nodes_per_element=f.nodes_per_element,
            dof_labels=list(f.dof_labels),
            strain_labels=list(f.strain_labels),
            stress_labels=list(f.stress_labels),
            defaults=asdict(FAMILY_DEFAULTS[f.name]),
        )
        for f in FAMILIES.values()
    ]


@app.post("/api/analyze", response_model=AnalysisResponse)
async def analyze(config: AnalysisConfig):
    """Build, solve and post-process one analysis."""
    return analyze_config(config)


@app.post("/api/export/text")
async def export_text(config: AnalysisConfig, sparse: bool = False, precision: int = 4):
    """Export the solved state as a text report."""
    result = _solve_or_400(config)
    return StreamingResponse(
        iter([report_text(result, sparse=sparse, precision=precision)]),
        media_type="text/plain",
        headers={"Content-Disposition": f"attachment; filename={result.family.name}_analysis.txt"}
    )


@app.post("/api/export/json")
async def export_json(config: AnalysisConfig):
    """Export model and results as JSON."""
    result = _solve_or_400(config)
    return StreamingResponse(
        iter([model_json(result)]),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={result.family.name}_model.json"}
    )


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
