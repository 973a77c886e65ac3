# mini_fem/errors.py
"""Exception types raised by the analysis pipeline."""


class FEMError(Exception):
    """Base class for every error raised by mini_fem."""
    pass


class ConfigurationError(FEMError, ValueError):
    """Invalid analysis options or mesh parameters (e.g. zero divisions)."""
    pass


class DegenerateGeometryError(FEMError, ValueError):
    """Zero-length element, non-positive area or non-invertible Jacobian."""
    pass


class SingularSystemError(FEMError, RuntimeError):
    """Raised when elimination meets a (near-)zero pivot."""

    def __init__(self, message: str, dof: int = None):
        super().__init__(message)
        self.dof = dof


class OutOfRangeError(FEMError, IndexError):
    """DOF, node or element index outside the valid range of a run."""
    pass
