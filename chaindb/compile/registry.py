"""Compiler registry (Open/Closed Principle).

``CompilerFactory`` is the central registry for
:class:`~chaindb.compile.base.SQLCompiler` implementations.  Drivers report
a dialect name; the facade looks the matching compiler up here, so adding a
dialect never requires editing the builder or the drivers.

Usage::

    from chaindb.compile.registry import CompilerFactory

    @CompilerFactory.register("duckdb")
    class DuckDBCompiler(SQLCompiler):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from chaindb.compile.base import SQLCompiler
from chaindb.errors import CompilationError

#: Alternative spellings reported by drivers (SQLAlchemy dialect names).
_ALIASES: dict[str, str] = {
    "postgresql": "postgres",
    "mariadb": "mysql",
    "pysqlite": "sqlite",
}


class CompilerFactory:
    """Registry mapping dialect names to :class:`SQLCompiler` classes.

    Callers register a compiler class once; the facade creates instances
    on demand via :meth:`create`.

    Example::

        @CompilerFactory.register("mysql")
        class MySQLCompiler(SQLCompiler):
            ...

        compiler = CompilerFactory.create("mysql")
    """

    _compilers: ClassVar[dict[str, type[SQLCompiler]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLCompiler]], type[SQLCompiler]]:
        """Decorator that registers a compiler class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the compiler class.
        """

        def decorator(compiler_cls: type[SQLCompiler]) -> type[SQLCompiler]:
            cls._compilers[name] = compiler_cls
            return compiler_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, compiler_cls: type[SQLCompiler]) -> None:
        """Register a compiler class without using the decorator form."""
        cls._compilers[name] = compiler_cls

    @classmethod
    def create(cls, name: str) -> SQLCompiler:
        """Instantiate the compiler registered for ``name``.

        Driver spellings such as ``"postgresql"`` are resolved to their
        canonical name first.

        Raises:
            CompilationError: If no compiler is registered for ``name``.
        """
        canonical = _ALIASES.get(name, name)
        compiler_cls = cls._compilers.get(canonical)
        if compiler_cls is None:
            registered = sorted(cls._compilers)
            raise CompilationError(
                f"Unsupported dialect: '{name}'. Registered dialects: {registered}."
            )
        return compiler_cls()

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._compilers)
