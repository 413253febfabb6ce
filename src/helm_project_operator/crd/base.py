"""Base classes for CRD spec and status models."""

from pydantic import BaseModel


class CRDSpec(BaseModel):
    """Base class for all CRD spec objects."""

    class Config:
        extra = "forbid"
        validate_assignment = True


class CRDStatus(BaseModel):
    """Base class for all CRD status objects."""

    class Config:
        extra = "allow"
