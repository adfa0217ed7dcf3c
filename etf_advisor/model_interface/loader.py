import importlib, os
from .allocation_model import AllocationModel

def load_model() -> AllocationModel:
    """
    Allocation model named by ALLOCATION_MODEL ("package.module:Factory"),
    or the advanced engine when unset. Read per call so tests can switch models.
    """
    target = os.getenv("ALLOCATION_MODEL", "").strip()
    if not target:
        from etf_advisor.model_impl.advanced_model import AdvancedModel
        return AdvancedModel()
    mod, sep, factory = target.partition(":")
    if not sep or not factory:
        raise ValueError(f"ALLOCATION_MODEL must look like 'module:Factory', got {target!r}")
    model = getattr(importlib.import_module(mod), factory)()
    if not isinstance(model, AllocationModel):
        raise TypeError(f"{target} did not produce an AllocationModel")
    return model
