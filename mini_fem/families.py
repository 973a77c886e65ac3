# Registry of the element families selectable by tag

from typing import Dict

from .continuum import CST, Hex8, Quad4
from .elements import Bar1D, Beam2D, Truss2D
from .errors import ConfigurationError
from .kernel.element import ElementFamily

FAMILIES: Dict[str, ElementFamily] = {
    family.name: family
    for family in (Bar1D(), Beam2D(), Truss2D(), CST(), Quad4(), Hex8())
}


def get_family(name: str) -> ElementFamily:
    """Family instance for a tag: bar, beam, truss, cst, quad or hex."""
    try:
        return FAMILIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown element family {name!r}; expected one of {sorted(FAMILIES)}"
        ) from None
