from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

RELATIONSHIP_PARENT = "parent"
RELATIONSHIP_SPOUSE = "spouse"
RELATIONSHIP_SIBLING = "sibling"

GENDER_UNKNOWN = "unknown"
_KNOWN_GENDERS = {"male", "female", GENDER_UNKNOWN}

CONNECTION_PARENT_CHILD = "parent-child"
CONNECTION_SPOUSE = "spouse"

RelationshipType = Literal["parent", "spouse", "sibling"]
ConnectionKind = Literal["parent-child", "spouse"]
LayoutDirection = Literal["ltr", "rtl"]


class Person(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1)
    given_name: str = ""
    patronymic_chain: Optional[str] = None
    family_name: Optional[str] = None
    full_name_ar: Optional[str] = None
    full_name_en: Optional[str] = None
    gender: str = GENDER_UNKNOWN
    birth_date: Optional[str] = None
    birth_place: Optional[str] = None
    death_date: Optional[str] = None
    death_place: Optional[str] = None
    is_living: bool = True

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, value: object) -> str:
        normalized = str(value or "").strip().lower()
        return normalized if normalized in _KNOWN_GENDERS else GENDER_UNKNOWN

    def display_name(self) -> str:
        for candidate in (self.full_name_en, self.full_name_ar):
            if candidate:
                return candidate
        parts = [self.given_name, self.family_name or ""]
        return " ".join(part for part in parts if part).strip() or self.id


class Relationship(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = ""
    person1_id: str
    person2_id: str
    relationship_type: RelationshipType
    marriage_date: Optional[str] = None
    marriage_place: Optional[str] = None
    divorce_date: Optional[str] = None
    divorce_place: Optional[str] = None

    @field_validator("relationship_type", mode="before")
    @classmethod
    def normalize_relationship_type(cls, value: object) -> str:
        return str(value or "").strip().lower()

    @property
    def is_dissolved(self) -> bool:
        return bool(self.divorce_date)


class TreeData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    persons: List[Person] = Field(default_factory=list)
    relationships: List[Relationship] = Field(default_factory=list)
    root_person_id: Optional[str] = None


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class TreeLayoutConfig:
    direction: LayoutDirection = "ltr"
    node_width: float = 200.0
    node_height: float = 120.0
    horizontal_spacing: float = 60.0
    vertical_spacing: float = 100.0
    spouse_spacing: float = 40.0
    show_siblings: bool = True
    root_person_id: str | None = None
    collapsed_ids: frozenset[str] = frozenset()
    max_generations: int | None = None
    padding: float = 50.0
    # Connector presentation hints.
    elbow_threshold: float = 24.0
    corner_radius: float = 16.0
    spouse_curvature: float = 0.25
    parent_child_color: str = "#64748b"
    spouse_color: str = "#10b981"
    divorced_color: str = "#ef4444"
    stroke_width: float = 2.0

    def fingerprint_payload(self) -> dict[str, Any]:
        return {
            "direction": self.direction,
            "node_width": self.node_width,
            "node_height": self.node_height,
            "horizontal_spacing": self.horizontal_spacing,
            "vertical_spacing": self.vertical_spacing,
            "spouse_spacing": self.spouse_spacing,
            "show_siblings": self.show_siblings,
            "root_person_id": self.root_person_id,
            "collapsed_ids": sorted(self.collapsed_ids),
            "max_generations": self.max_generations,
            "padding": self.padding,
            "elbow_threshold": self.elbow_threshold,
            "corner_radius": self.corner_radius,
            "spouse_curvature": self.spouse_curvature,
            "parent_child_color": self.parent_child_color,
            "spouse_color": self.spouse_color,
            "divorced_color": self.divorced_color,
            "stroke_width": self.stroke_width,
        }


@dataclass(frozen=True)
class BuildTreeOptions:
    include_siblings: bool = True
    collapsed_ids: frozenset[str] = frozenset()


@dataclass
class SpouseInfo:
    partner_id: str
    relationship: Relationship
    common_children: List[str] = field(default_factory=list)


@dataclass(eq=False)
class GraphNode:
    id: str
    person: Person
    level: int = 0
    parents: List[str] = field(default_factory=list)
    children: List[str] = field(default_factory=list)
    spouses: List[SpouseInfo] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    subtree_width: float = 0.0
    is_collapsed: bool = False
    is_placed: bool = False

    def spouse_info(self, partner_id: str) -> SpouseInfo | None:
        for info in self.spouses:
            if info.partner_id == partner_id:
                return info
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.person.display_name(),
            "gender": self.person.gender,
            "level": self.level,
            "x": self.x,
            "y": self.y,
            "subtree_width": self.subtree_width,
            "is_collapsed": self.is_collapsed,
            "is_placed": self.is_placed,
            "parents": list(self.parents),
            "children": list(self.children),
            "spouses": [
                {
                    "partner_id": info.partner_id,
                    "relationship_id": info.relationship.id,
                    "common_children": list(info.common_children),
                }
                for info in self.spouses
            ],
        }


@dataclass
class TreeGraph:
    """Owning arena of graph nodes.

    Nodes reference each other by id only; every traversal resolves
    neighbours through this collection.
    """

    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    sibling_pairs: List[Tuple[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self.nodes.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def get(self, node_id: str | None) -> GraphNode | None:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def node(self, node_id: str) -> GraphNode:
        return self.nodes[node_id]

    def ordered(self) -> List[GraphNode]:
        return list(self.nodes.values())

    def children_of(self, node: GraphNode) -> List[GraphNode]:
        return [self.nodes[child_id] for child_id in node.children if child_id in self.nodes]

    def partners_of(self, node: GraphNode) -> List[GraphNode]:
        return [
            self.nodes[info.partner_id] for info in node.spouses if info.partner_id in self.nodes
        ]


@dataclass(frozen=True)
class ConnectionDescriptor:
    id: str
    kind: ConnectionKind
    source_id: str
    target_id: str
    start: Point
    end: Point
    path: str
    color: str
    stroke_width: float
    is_dashed: bool
    relationship_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "start": {"x": self.start.x, "y": self.start.y},
            "end": {"x": self.end.x, "y": self.end.y},
            "path": self.path,
            "color": self.color,
            "stroke_width": self.stroke_width,
            "is_dashed": self.is_dashed,
            "relationship_id": self.relationship_id,
        }


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    width: float
    height: float

    def to_dict(self) -> dict[str, float]:
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "min_y": self.min_y,
            "max_y": self.max_y,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class ViewportTransform:
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "scale": self.scale,
            "translate_x": self.translate_x,
            "translate_y": self.translate_y,
        }


@dataclass(frozen=True)
class Layout:
    nodes: Tuple[GraphNode, ...]
    connections: Tuple[ConnectionDescriptor, ...]
    root: GraphNode
    bounding_box: BoundingBox
    sibling_pairs: Tuple[Tuple[str, str], ...] = ()

    def node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for renderers.

        Every node is included. Nodes with ``is_placed`` false were not reached
        from the root (a spouse's other union, a disconnected fragment) and sit
        at the origin; skip them when drawing.
        """
        return {
            "root_id": self.root.id,
            "nodes": [node.to_dict() for node in self.nodes],
            "connections": [connection.to_dict() for connection in self.connections],
            "bounding_box": self.bounding_box.to_dict(),
            "sibling_pairs": [list(pair) for pair in self.sibling_pairs],
        }
