# utils/tree_index.py
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from fastener_console.core.exceptions import CycleDetected

logger = logging.getLogger(__name__)

DANGLING_PARENT = "dangling_parent"
SELF_PARENT = "self_parent"
DUPLICATE_ID = "duplicate_id"
INVALID_ID = "invalid_id"
CYCLE = "cycle"


@dataclass(frozen=True)
class IntegrityIssue:
    """One structural problem found in the source records"""
    node_id: Any
    kind: str
    detail: str

    def to_dict(self) -> dict:
        return {"node_id": self.node_id, "kind": self.kind, "detail": self.detail}


@dataclass(frozen=True)
class FlatNode:
    """A node tagged with its depth, as produced by TreeIndex.flatten()"""
    node_id: int
    node: dict
    level: int

    def to_dict(self) -> dict:
        item = dict(self.node)
        item["level"] = self.level
        return item


class TreeIndex:
    """
    Lookup structure over a parent-referencing hierarchy (companies, menus).

    Accepts flat records ({id, parent_id, ...}) or pre-nested records carrying
    `children`. Broken structure never fails the whole index: dangling and
    self-referencing parents become flagged roots, nodes on a cycle are flagged
    and left out of flatten()/nested(). Flags are collected in `issues`.
    """

    def __init__(self, id_key: str = "id", parent_key: str = "parent_id", children_key: str = "children"):
        self.id_key = id_key
        self.parent_key = parent_key
        self.children_key = children_key
        self._nodes: Dict[int, dict] = {}
        self._children: Dict[int, List[int]] = {}
        self._roots: List[int] = []
        self._issues: Dict[Tuple[Any, str], IntegrityIssue] = {}

    @classmethod
    def build(
            cls,
            records: Iterable[Mapping[str, Any]],
            id_key: str = "id",
            parent_key: str = "parent_id",
            children_key: str = "children",
    ) -> "TreeIndex":
        index = cls(id_key=id_key, parent_key=parent_key, children_key=children_key)
        index._load(records or [])
        return index

    # ------------------------------
    # building
    # ------------------------------
    def _load(self, records: Iterable[Mapping[str, Any]]) -> None:
        order: List[int] = []
        for record, nested_parent in self._walk_records(records):
            raw_id = record.get(self.id_key)
            node_id = _as_int(raw_id)
            if node_id is None:
                self._flag(raw_id, INVALID_ID, f"record without a usable {self.id_key}")
                continue
            if node_id in self._nodes:
                self._flag(node_id, DUPLICATE_ID, "duplicate id, first record kept")
                continue

            node = {key: value for key, value in record.items() if key != self.children_key}
            node[self.id_key] = node_id
            raw_parent = record.get(self.parent_key)
            node[self.parent_key] = _as_int(raw_parent) if raw_parent is not None else nested_parent
            self._nodes[node_id] = node
            order.append(node_id)

        for node_id in order:
            parent_id = self._nodes[node_id][self.parent_key]
            if parent_id is None:
                self._roots.append(node_id)
            elif parent_id == node_id:
                self._flag(node_id, SELF_PARENT, "node is its own parent, treated as root")
                self._roots.append(node_id)
            elif parent_id not in self._nodes:
                self._flag(node_id, DANGLING_PARENT, f"parent {parent_id} not found, treated as root")
                self._roots.append(node_id)
            else:
                self._children.setdefault(parent_id, []).append(node_id)

        self._roots.sort(key=self._sort_key)
        for child_ids in self._children.values():
            child_ids.sort(key=self._sort_key)

        reachable = self._reach(self._roots)
        for node_id in order:
            if node_id not in reachable:
                self._flag(node_id, CYCLE, "node is not reachable from any root (parent chain loops)")

    def _walk_records(self, records: Iterable[Mapping[str, Any]]) -> Iterator[Tuple[Mapping[str, Any], Optional[int]]]:
        """Pre-order walk over possibly nested records, yields (record, parent id implied by nesting)"""
        stack = [(record, None) for record in reversed(list(records))]
        seen: Set[int] = set()
        while stack:
            record, nested_parent = stack.pop()
            if not isinstance(record, Mapping) or id(record) in seen:
                continue
            seen.add(id(record))
            yield record, nested_parent

            children = record.get(self.children_key)
            if isinstance(children, list) and children:
                parent_id = _as_int(record.get(self.id_key))
                stack.extend((child, parent_id) for child in reversed(children))

    def _reach(self, start_ids: Iterable[int]) -> Set[int]:
        seen: Set[int] = set()
        queue = deque(start_ids)
        while queue:
            node_id = queue.popleft()
            if node_id in seen:
                continue
            seen.add(node_id)
            queue.extend(self._children.get(node_id, []))
        return seen

    def _sort_key(self, node_id: int) -> Tuple[int, int]:
        order_no = _as_int(self._nodes[node_id].get("order_no"))
        return (order_no if order_no is not None else 0, node_id)

    def _flag(self, node_id: Any, kind: str, detail: str) -> None:
        key = (node_id, kind)
        if key in self._issues:
            return
        self._issues[key] = IntegrityIssue(node_id=node_id, kind=kind, detail=detail)
        logger.warning(f"[TREE] Integrity issue on node {node_id}: {kind} ({detail})")

    # ------------------------------
    # lookups
    # ------------------------------
    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: Any) -> bool:
        return _as_int(node_id) in self._nodes

    @property
    def issues(self) -> List[IntegrityIssue]:
        return list(self._issues.values())

    @property
    def flagged_ids(self) -> Set[Any]:
        return {issue.node_id for issue in self._issues.values()}

    @property
    def root_ids(self) -> List[int]:
        return list(self._roots)

    def get(self, node_id: Any) -> Optional[dict]:
        return self._nodes.get(_as_int(node_id))

    def children_of(self, node_id: int) -> List[dict]:
        return [self._nodes[child_id] for child_id in self._children.get(node_id, [])]

    # ------------------------------
    # queries
    # ------------------------------
    def flatten(self, start_id: Optional[int] = None) -> List[FlatNode]:
        """
        Depth-first pre-order (parent before descendants, siblings by (order_no, id)).
        Starts from every root, or from start_id only (its level is 0).
        A node seen twice aborts that branch and is flagged, so the result is
        bounded by the node count.
        """
        if start_id is None:
            start_ids = self._roots
        elif start_id in self._nodes:
            start_ids = [start_id]
        else:
            return []

        result: List[FlatNode] = []
        visited: Set[int] = set()
        stack = [(node_id, 0) for node_id in reversed(start_ids)]
        while stack:
            node_id, level = stack.pop()
            if node_id in visited:
                self._flag(node_id, CYCLE, "node revisited during flatten, branch skipped")
                continue
            visited.add(node_id)
            result.append(FlatNode(node_id=node_id, node=self._nodes[node_id], level=level))
            for child_id in reversed(self._children.get(node_id, [])):
                stack.append((child_id, level + 1))
        return result

    def descendant_ids(self, root_id: int) -> Set[int]:
        """root_id plus everything below it (breadth-first). Unknown id -> empty set"""
        if root_id not in self._nodes:
            return set()
        return self._reach([root_id])

    def ancestor_path(self, node_id: int) -> List[dict]:
        """
        Nodes from the root down to node_id, following parent links.
        Raises CycleDetected (with the partial path) when the chain loops.
        """
        path: List[dict] = []
        seen: Set[int] = set()
        current = node_id
        while current is not None and current in self._nodes:
            if current in seen:
                self._flag(current, CYCLE, "parent chain loops back")
                raise CycleDetected(node_id, partial_path=list(reversed(path)))
            seen.add(current)
            node = self._nodes[current]
            path.append(node)
            current = node[self.parent_key]
        return list(reversed(path))

    def nested(
            self,
            include: Optional[Callable[[dict], bool]] = None,
            decorate: Optional[Callable[[dict], dict]] = None,
    ) -> List[dict]:
        """
        Nested rendering with `children` and `level` on every node.
        A node rejected by include is dropped together with its subtree.
        """
        result: List[dict] = []
        visited: Set[int] = set()
        # (node id, level, list the rendered node goes into)
        stack = [(root_id, 0, result) for root_id in reversed(self._roots)]
        while stack:
            node_id, level, siblings = stack.pop()
            if node_id in visited or (include is not None and not include(self._nodes[node_id])):
                continue
            visited.add(node_id)
            node = self._nodes[node_id]
            item = dict(node)
            if decorate is not None:
                item.update(decorate(node))
            item["level"] = level
            item[self.children_key] = []
            siblings.append(item)
            for child_id in reversed(self._children.get(node_id, [])):
                stack.append((child_id, level + 1, item[self.children_key]))
        return result


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None
