# mini_fem/config.py
"""
Analysis configuration and per-family defaults.

AnalysisConfig is the single construction-time input of an analysis run.
Every option left unset falls back to the FAMILY_DEFAULTS preset of the
chosen element family.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigurationError
from .families import get_family

FamilyName = Literal["bar", "beam", "truss", "cst", "quad", "hex"]

# Upper bound on the dense global system size
MAX_DOFS = 4096


@dataclass(frozen=True)
class FamilyDefaults:
    """Preset material, mesh and load case for one element family."""

    E: float
    nu: float = 0.0
    A: float = 1.0
    t: float = 1.0
    I: float = 1.0

    # mesh
    n_elements: Optional[int] = None
    n_nodes: Optional[int] = None
    nx: int = 1
    ny: int = 1
    nz: int = 1
    length: float = 1.0
    spacing: float = 1.0
    width: float = 1.0
    height: float = 1.0
    depth: float = 1.0

    # load case
    support: str = "first_node"        # first_node | first_two_nodes | xmin | zmin
    support_components: Optional[Tuple[int, ...]] = None
    load_nodes: str = "last"           # last | all
    load: Tuple[float, ...] = field(default_factory=tuple)


FAMILY_DEFAULTS: Dict[str, FamilyDefaults] = {
    "bar": FamilyDefaults(
        E=210e9, A=0.01, n_elements=5, length=1.0,
        support="first_node", load=(1000.0,),
    ),
    "beam": FamilyDefaults(
        E=2e5, I=4e6, n_nodes=3, n_elements=2, spacing=1000.0,
        support="first_node", load=(-6000.0, 1e6),
    ),
    "truss": FamilyDefaults(
        E=2e7, A=1.0, n_nodes=4, width=40.0, height=40.0,
        support="first_two_nodes", load=(20000.0, -25000.0),
    ),
    "cst": FamilyDefaults(
        E=3e7, nu=0.25, t=1.0, nx=2, ny=2, width=400.0, height=400.0,
        support="xmin", load=(-200.0, -400.0),
    ),
    "quad": FamilyDefaults(
        E=7e4, nu=0.33, t=10.0, nx=2, ny=2, width=60.0, height=30.0,
        support="xmin", load=(-10000.0, 0.0),
    ),
    "hex": FamilyDefaults(
        E=2e5, nu=0.3, nx=1, ny=1, nz=1, width=1.0, depth=1.0, height=1.0,
        support="zmin", load_nodes="all", load=(0.0, 0.0, -80000.0),
    ),
}


class NodalLoad(BaseModel):
    """Concentrated load on one DOF (component is the local DOF of the node)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    node: int = Field(..., ge=0, description="Node id")
    component: int = Field(0, ge=0, description="Local DOF of the node")
    value: float = Field(..., description="Load value")


class Support(BaseModel):
    """Prescribed displacement on some or all DOFs of a node (default fixed)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    node: int = Field(..., ge=0, description="Node id")
    components: Optional[List[int]] = Field(
        None, description="Local DOFs to constrain; all when omitted"
    )
    value: float = Field(0.0, description="Prescribed displacement")


class AnalysisConfig(BaseModel):
    """
    Options of one analysis run.

    Counts and lengths apply to the mesh generator of the family:
        bar    n_elements, length
        beam   n_nodes, n_elements, spacing
        truss  n_nodes, n_elements, width, height (bay)
        cst    nx, ny, width, height
        quad   nx, ny, width, height
        hex    nx, ny, nz, width, depth, height
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    family: FamilyName = Field(..., description="Element family tag")

    n_elements: Optional[int] = Field(None, ge=1, le=1000, description="Element count")
    n_nodes: Optional[int] = Field(None, ge=2, le=1000, description="Node count")
    nx: Optional[int] = Field(None, ge=1, le=100, description="Divisions along x")
    ny: Optional[int] = Field(None, ge=1, le=100, description="Divisions along y")
    nz: Optional[int] = Field(None, ge=1, le=100, description="Divisions along z")

    length: Optional[float] = Field(None, gt=0, description="Bar length")
    spacing: Optional[float] = Field(None, gt=0, description="Beam node spacing")
    width: Optional[float] = Field(None, gt=0, description="Extent along x")
    height: Optional[float] = Field(None, gt=0, description="Extent along y (z for hex)")
    depth: Optional[float] = Field(None, gt=0, description="Extent along y for hex")

    E: Optional[float] = Field(None, gt=0, description="Young's modulus")
    nu: Optional[float] = Field(None, gt=-1, lt=0.5, description="Poisson ratio")
    A: Optional[float] = Field(None, gt=0, description="Cross-section area")
    t: Optional[float] = Field(None, gt=0, description="Thickness")
    I: Optional[float] = Field(None, gt=0, description="Second moment of area")

    loads: Optional[List[NodalLoad]] = None
    supports: Optional[List[Support]] = None

    penalty: float = Field(1e20, gt=0, description="Minimum penalty stiffness")
    workers: int = Field(1, ge=1, le=64, description="Threads for element matrices")

    @property
    def defaults(self) -> FamilyDefaults:
        return FAMILY_DEFAULTS[self.family]

    def value(self, name: str) -> Any:
        """Explicit option, or the family preset when unset."""
        explicit = getattr(self, name)
        return explicit if explicit is not None else getattr(self.defaults, name)

    def estimated_dofs(self) -> int:
        """Global DOF count of the mesh these options generate."""
        v = self.value
        if self.family == "bar":
            n_nodes = v("n_elements") + 1
        elif self.family in ("beam", "truss"):
            n_nodes = v("n_nodes")
        elif self.family == "hex":
            n_nodes = (v("nx") + 1) * (v("ny") + 1) * (v("nz") + 1)
        else:
            n_nodes = (v("nx") + 1) * (v("ny") + 1)
        return n_nodes * get_family(self.family).dof_per_node

    @model_validator(mode="after")
    def _bounded_system(self) -> "AnalysisConfig":
        ndof = self.estimated_dofs()
        if ndof > MAX_DOFS:
            raise ValueError(
                f"mesh would have {ndof} degrees of freedom, the limit is {MAX_DOFS}"
            )
        return self


def load_config(data: Union[AnalysisConfig, Mapping[str, Any]]) -> AnalysisConfig:
    """
    Validate options, turning pydantic errors into ConfigurationError.

    >>> load_config({"family": "bar", "n_elements": 2}).value("E")
    210000000000.0
    """
    if isinstance(data, AnalysisConfig):
        return data
    try:
        return AnalysisConfig.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid analysis configuration: {e}") from e
