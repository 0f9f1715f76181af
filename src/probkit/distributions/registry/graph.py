"""
Characteristic Graph and Per-Distribution Views
===============================================

A single global directed graph over characteristic names (``pdf``, ``cdf``,
``mean``, ...) whose edges are unary conversions. A concrete distribution sees
a filtered :class:`RegistryView` of it: nodes and edges are kept only when
their constraints allow the distribution.

Each node carries two independent rules:

(A) presence: whether the node exists in the view;
(B) definitiveness: whether the node is definitive (the distribution is
    fully determined by it).

Invariants (checked on every view)
----------------------------------
1. The subgraph induced by definitive characteristics is strongly connected.
2. Every non-definitive characteristic is reachable from a definitive one.
3. No non-definitive characteristic reaches a definitive one.

Notes
-----
* Only unary computations (1 source -> 1 target) are supported.
* Nodes must be declared with :meth:`CharacteristicRegistry.add_characteristic`
  before edges touching them are added.
* The registry is a process-wide singleton; label variants of an edge are
  kept side by side.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import warnings
from collections import deque
from typing import TYPE_CHECKING, Any, ClassVar, Self, TypeAlias

from probkit.distributions.registry.constraint import GraphPrimitiveConstraint
from probkit.distributions.registry.graph_primitives import DEFAULT_COMPUTATION_KEY, EdgeMeta
from probkit.errors import GraphInvariantError, InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from probkit.distributions.computation import ComputationMethod
    from probkit.distributions.distribution import Distribution
    from probkit.types import GenericCharacteristicName

    _Adjacency: TypeAlias = dict[
        GenericCharacteristicName, dict[GenericCharacteristicName, dict[str, EdgeMeta]]
    ]


class CharacteristicRegistry:
    """
    Global characteristic graph with constraint-guarded nodes and edges.

    Notes
    -----
    No invariant is checked while the registry is mutated; the checks run when
    a :class:`RegistryView` is built by :meth:`view`.
    """

    _instance: ClassVar[Self | None] = None

    def __new__(cls) -> Self:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        # src -> dst -> label -> candidate edges, first applicable wins
        self._adj: dict[
            GenericCharacteristicName,
            dict[GenericCharacteristicName, dict[str, list[EdgeMeta]]],
        ] = {}
        self._presence_rules: dict[GenericCharacteristicName, GraphPrimitiveConstraint] = {}
        self._def_rules: dict[GenericCharacteristicName, GraphPrimitiveConstraint] = {}
        self._defaults_configured = False
        self._initialized = True

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[Any, Any]) -> Self:
        return self

    def __reduce__(self) -> tuple[type[Self], tuple[()]]:
        return self.__class__, ()

    @classmethod
    def _reset(cls) -> None:
        """Drop the singleton (test helper)."""
        cls._instance = None

    @property
    def characteristics(self) -> frozenset[GenericCharacteristicName]:
        """All declared characteristic names."""
        return frozenset(self._presence_rules)

    def add_characteristic(
        self,
        name: GenericCharacteristicName,
        is_definitive: bool,
        *,
        presence_constraint: GraphPrimitiveConstraint | None = None,
        definitive_constraint: GraphPrimitiveConstraint | None = None,
    ) -> None:
        """
        Declare a characteristic node.

        Parameters
        ----------
        name : str
            Characteristic name.
        is_definitive : bool
            Whether the node can be definitive at all.
        presence_constraint : GraphPrimitiveConstraint, optional
            When the node exists; everywhere by default.
        definitive_constraint : GraphPrimitiveConstraint, optional
            When the node is definitive; ignored (with a warning) for
            non-definitive nodes.

        Notes
        -----
        Re-declaring a node keeps the first rules and emits a ``UserWarning``.
        """
        if name in self._presence_rules:
            warnings.warn(
                f"Characteristic {name!r} is already declared; new constraints are ignored",
                UserWarning,
                stacklevel=2,
            )
            return
        self._adj.setdefault(name, {})
        self._presence_rules[name] = presence_constraint or GraphPrimitiveConstraint()
        if is_definitive:
            self._def_rules[name] = definitive_constraint or GraphPrimitiveConstraint()
        elif definitive_constraint is not None:
            warnings.warn(
                f"Characteristic {name!r} is non-definitive; its definitive constraint is ignored",
                UserWarning,
                stacklevel=2,
            )

    def add_computation(
        self,
        method: ComputationMethod[Any, Any],
        *,
        label: str = DEFAULT_COMPUTATION_KEY,
        constraint: GraphPrimitiveConstraint | None = None,
    ) -> None:
        """
        Add a labeled unary conversion edge ``method.sources[0] -> method.target``.

        Raises
        ------
        InvalidArgumentError
            If the method is not unary or one of its endpoints is undeclared.
        """
        if len(method.sources) != 1:
            raise InvalidArgumentError("Only unary computations are supported")
        src, dst = method.sources[0], method.target
        if src not in self._presence_rules or dst not in self._presence_rules:
            raise InvalidArgumentError(f"Undeclared characteristic in edge {src!r} -> {dst!r}")
        variants = self._adj[src].setdefault(dst, {})
        variants.setdefault(label, []).append(
            EdgeMeta(method=method, constraint=constraint or GraphPrimitiveConstraint())
        )

    def view(self, distr: Distribution) -> RegistryView:
        """
        Build the validated view of the graph seen by ``distr``.

        Raises
        ------
        GraphInvariantError
            If the filtered graph violates one of the module invariants.
        """
        present = {n for n, c in self._presence_rules.items() if c.allows(distr)}
        definitive = {n for n, c in self._def_rules.items() if c.allows(distr)} & present

        adj: _Adjacency = {n: {} for n in present}
        for src, by_dst in self._adj.items():
            if src not in present:
                continue
            for dst, variants in by_dst.items():
                if dst not in present:
                    continue
                kept: dict[str, EdgeMeta] = {}
                # first applicable candidate per label
                for label, edges in variants.items():
                    applicable = [e for e in edges if e.constraint.allows(distr)]
                    if applicable:
                        kept[label] = applicable[0]
                if kept:
                    adj[src][dst] = kept

        return RegistryView(adj, definitive, present)


class RegistryView:
    """
    Filtered, validated view of the characteristic graph.

    Parameters
    ----------
    adj : Mapping[str, Mapping[str, Mapping[str, EdgeMeta]]]
        Adjacency ``src -> dst -> label -> edge``.
    definitive_nodes : set[str]
        Definitive characteristics of the view.
    present_nodes : set[str]
        All characteristics of the view.
    """

    def __init__(
        self,
        adj: Mapping[
            GenericCharacteristicName,
            Mapping[GenericCharacteristicName, Mapping[str, EdgeMeta]],
        ],
        definitive_nodes: set[GenericCharacteristicName],
        present_nodes: set[GenericCharacteristicName],
    ) -> None:
        self._adj: _Adjacency = {
            s: {t: dict(variants) for t, variants in d.items()} for s, d in adj.items()
        }
        self.definitive_characteristics: frozenset[GenericCharacteristicName] = frozenset(
            definitive_nodes
        )
        self.all_characteristics: frozenset[GenericCharacteristicName] = frozenset(present_nodes)
        self._validate_invariants()

    @property
    def indefinitive_characteristics(self) -> frozenset[GenericCharacteristicName]:
        return self.all_characteristics - self.definitive_characteristics

    def successors(
        self, v: GenericCharacteristicName
    ) -> Mapping[GenericCharacteristicName, Mapping[str, EdgeMeta]]:
        return self._adj.get(v, {})

    def predecessors(self, v: GenericCharacteristicName) -> set[GenericCharacteristicName]:
        return {s for s, d in self._adj.items() if d.get(v)}

    def variants(
        self, src: GenericCharacteristicName, dst: GenericCharacteristicName
    ) -> Mapping[str, EdgeMeta]:
        return self._adj.get(src, {}).get(dst, {})

    def find_path(
        self,
        src: GenericCharacteristicName,
        dst: GenericCharacteristicName,
        *,
        prefer_label: str | None = None,
    ) -> list[ComputationMethod[Any, Any]] | None:
        """
        Shortest conversion chain ``src -> ... -> dst`` (breadth-first).

        Per edge the label ``prefer_label`` is taken when available, then
        :data:`DEFAULT_COMPUTATION_KEY`, then the smallest label.

        Returns
        -------
        list[ComputationMethod] | None
            Methods along the path (empty for ``src == dst``), or ``None``
            when ``dst`` is unreachable.
        """
        if src == dst:
            return []
        parent: dict[GenericCharacteristicName, tuple[GenericCharacteristicName, EdgeMeta]] = {}
        queue = deque([src])
        while queue:
            v = queue.popleft()
            for w, by_label in self._adj.get(v, {}).items():
                if w == src or w in parent or not by_label:
                    continue
                parent[w] = (v, self._pick(by_label, prefer_label))
                if w == dst:
                    path: list[ComputationMethod[Any, Any]] = []
                    cur = dst
                    while cur != src:
                        cur, edge = parent[cur]
                        path.append(edge.method)
                    path.reverse()
                    return path
                queue.append(w)
        return None

    @staticmethod
    def _pick(by_label: Mapping[str, EdgeMeta], prefer_label: str | None) -> EdgeMeta:
        if prefer_label is not None and prefer_label in by_label:
            return by_label[prefer_label]
        if DEFAULT_COMPUTATION_KEY in by_label:
            return by_label[DEFAULT_COMPUTATION_KEY]
        return by_label[min(by_label)]

    def _reachable_from(
        self,
        src: GenericCharacteristicName,
        allowed: frozenset[GenericCharacteristicName] | None = None,
        *,
        reverse: bool = False,
    ) -> set[GenericCharacteristicName]:
        """Nodes reachable from ``src`` (``src`` excluded unless on a cycle)."""
        seen: set[GenericCharacteristicName] = set()
        stack = [src]
        while stack:
            v = stack.pop()
            step = self.predecessors(v) if reverse else set(self._adj.get(v, {}))
            for w in step:
                if w in seen or (allowed is not None and w not in allowed):
                    continue
                seen.add(w)
                stack.append(w)
        return seen

    def _validate_invariants(self) -> None:
        defs = self.definitive_characteristics
        if len(defs) > 1:
            start = next(iter(defs))
            forward = self._reachable_from(start, defs) | {start}
            backward = self._reachable_from(start, defs, reverse=True) | {start}
            if forward != defs or backward != defs:
                raise GraphInvariantError("Definitive subgraph must be strongly connected")

        reachable: set[GenericCharacteristicName] = set()
        for d in defs:
            reachable |= self._reachable_from(d)
        unreachable = self.indefinitive_characteristics - reachable
        if unreachable:
            raise GraphInvariantError(
                f"Characteristics {sorted(unreachable)} are not reachable from a definitive one"
            )

        for i in self.indefinitive_characteristics:
            if self._reachable_from(i) & defs:
                raise GraphInvariantError(
                    f"Non-definitive characteristic {i!r} must not lead to a definitive one"
                )
