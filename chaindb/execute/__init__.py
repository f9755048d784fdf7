"""chaindb execution layer: driver calls and result materialization."""
from chaindb.execute.executor import Executor
from chaindb.execute.results import materialize

__all__ = ["Executor", "materialize"]
