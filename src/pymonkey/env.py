"""
Monkey Environment
Chained, mutable symbol table for lexical scoping

Each Environment maps names to mutable cells and keeps a reference to its
parent (never to its children). Lookup and assignment walk outward through
the parent chain; declaration only ever touches the current scope.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional

from pymonkey.types import Value, NULL
from pymonkey.errors import MonkeyError


#==============================================================================
# Cells
#==============================================================================

class Cell:
    """Mutable slot holding the current value of one binding"""

    __slots__ = ("value",)

    def __init__(self, value: Value):
        self.value = value

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


#==============================================================================
# Environment
#==============================================================================

class Environment:
    """
    Mutable value environment with parent delegation.

    A parent-less environment is a root (global) scope. Function calls
    create a child of the closure's captured environment; blocks do not
    create scopes.
    """

    def __init__(self, parent: Optional["Environment"] = None):
        """
        Create a new environment.

        Args:
            parent: Enclosing environment used for lookup chaining (optional)
        """
        self._cells: Dict[str, Cell] = {}
        self._parent = parent

    @property
    def parent(self) -> Optional["Environment"]:
        return self._parent

    @property
    def depth(self) -> int:
        """Number of ancestors above this environment"""
        depth = 0
        env = self._parent
        while env is not None:
            depth += 1
            env = env._parent
        return depth

    def _find_cell(self, name: str) -> Optional[Cell]:
        env: Optional[Environment] = self
        while env is not None:
            cell = env._cells.get(name)
            if cell is not None:
                return cell
            env = env._parent
        return None

    #---------------------------------------------------------------------------
    # Binding Operations
    #---------------------------------------------------------------------------

    def declare_variable(self, name: str) -> None:
        """
        Introduce name in this scope, bound to null.

        Shadowing a binding of an enclosing scope is allowed.

        Raises:
            MonkeyError: DuplicateDeclaration if name already exists in this scope
        """
        if name in self._cells:
            raise MonkeyError.duplicate_declaration(name)
        self._cells[name] = Cell(NULL)

    def get_variable_value(self, name: str) -> Value:
        """
        Look up name in this scope, then in enclosing scopes.

        Raises:
            MonkeyError: UnboundIdentifier if no scope in the chain declares name
        """
        cell = self._find_cell(name)
        if cell is None:
            raise MonkeyError.unbound_identifier(name)
        return cell.value

    def set_variable_value(self, name: str, value: Value) -> None:
        """
        Replace the value of the nearest binding of name.

        Never creates a binding; use declare_variable for that.

        Raises:
            MonkeyError: UnboundIdentifier if no scope in the chain declares name
        """
        cell = self._find_cell(name)
        if cell is None:
            raise MonkeyError.unbound_identifier(name)
        cell.value = value

    def define(self, name: str, value: Value) -> None:
        """Declare name in this scope and bind it to value"""
        self.declare_variable(name)
        self._cells[name].value = value

    def lookup(self, name: str) -> Optional[Value]:
        """
        Look up a value binding through the chain.

        Returns:
            Value if found, None otherwise
        """
        cell = self._find_cell(name)
        return cell.value if cell is not None else None

    def child(self) -> "Environment":
        """Create a new scope enclosed by this one"""
        return Environment(parent=self)

    def names(self) -> List[str]:
        """Names declared directly in this scope, in declaration order"""
        return list(self._cells)

    def __contains__(self, name: str) -> bool:
        """Check if a name is bound anywhere in the chain."""
        return self._find_cell(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        """Return the number of bindings in this scope."""
        return len(self._cells)

    def __repr__(self) -> str:
        # Values may be closures over this environment; print names only.
        return f"Environment(names={self.names()!r}, depth={self.depth})"


def empty_environment() -> Environment:
    """
    Create an empty root environment.

    Returns:
        New parent-less Environment with no bindings
    """
    return Environment()
