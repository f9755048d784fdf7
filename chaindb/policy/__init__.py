"""chaindb policy layer: table / column access control and LIMIT rules."""
from chaindb.policy.engine import PolicyConfig, PolicyEngine, TablePolicy

__all__ = ["PolicyConfig", "PolicyEngine", "TablePolicy"]
