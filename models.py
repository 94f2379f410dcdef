"""
Pydantic models for the Family Tree layout service.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, FrozenSet, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator
import uuid


def generate_id() -> str:
    """Generate a unique ID."""
    return str(uuid.uuid4())


class Person(BaseModel):
    """Model representing a person in the family tree."""
    id: str = Field(default_factory=generate_id)
    name: str = ""
    generation: Optional[int] = None  # ancestral row, 1 = oldest
    gender: str = "unknown"  # male, female, unknown
    is_living: bool = True
    date_of_birth: Optional[str] = None
    date_of_death: Optional[str] = None

    @field_validator("generation", mode="before")
    @classmethod
    def drop_unusable_generation(cls, value):
        """Anything that is not a positive whole number is treated as unknown."""
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value.isdigit():
                return None
            value = int(value)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or value < 1:
            return None
        return value


class Union(BaseModel):
    """A parental pairing that children are linked to."""
    id: str = Field(default_factory=generate_id)
    father_id: Optional[str] = None
    mother_id: Optional[str] = None


class ChildLink(BaseModel):
    """Associates a child with the union of its recognized parents."""
    union_id: str
    person_id: str


class FamilyTree(BaseModel):
    """Model representing the entire record set."""
    persons: Dict[str, Person] = Field(default_factory=dict)
    unions: Dict[str, Union] = Field(default_factory=dict)
    child_links: List[ChildLink] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ViewMode(str, Enum):
    ALL = "all"
    ANCESTORS = "ancestors"
    DESCENDANTS = "descendants"


class ViewState(BaseModel):
    """Immutable snapshot of the collapse set, view mode and focus."""
    model_config = ConfigDict(frozen=True)

    collapsed: FrozenSet[str] = frozenset()
    mode: ViewMode = ViewMode.ALL
    focus: Optional[str] = None


class ViewModeUpdate(BaseModel):
    """Model for switching the view mode."""
    mode: ViewMode
    focus: Optional[str] = None


class LayoutOptions(BaseModel):
    """Presentation constants for the layout pass."""
    node_width: float = 120.0
    node_height: float = 80.0
    level_height: float = 140.0  # vertical spacing between generation rows
    sibling_gap: float = 20.0
    top_margin: float = 20.0
    margin: float = 50.0  # padding around the diagram bounds


@dataclass
class RelationshipIndex:
    """Adjacency built from unions and child links, keyed by identifier."""
    union_children: Dict[str, List[str]] = field(default_factory=dict)
    child_union: Dict[str, str] = field(default_factory=dict)
    child_parents: Dict[str, List[str]] = field(default_factory=dict)
    parent_children: Dict[str, List[str]] = field(default_factory=dict)

    def parents_of(self, person_id: str) -> List[str]:
        return self.child_parents.get(person_id, [])

    def children_of(self, person_id: str) -> List[str]:
        return self.parent_children.get(person_id, [])


class PlacedNode(BaseModel):
    """A visible person with its computed position (top-left corner)."""
    person_id: str
    name: str = ""
    gender: str = "unknown"
    is_living: bool = True
    generation: int = 1
    row: int
    slot: int
    x: float
    y: float
    width: float
    height: float
    is_collapsed: bool = False
    has_children: bool = False
    has_hidden_children: bool = False

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


class Connector(BaseModel):
    """A drawn link between placed nodes."""
    id: str
    kind: str  # spouse, parent-child
    union_id: str
    source_ids: List[str]
    target_id: str
    points: List[Tuple[float, float]]


class Bounds(BaseModel):
    """Canvas extent of the placed nodes."""
    min_x: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    center_offset: float = 0.0


class TreeLayout(BaseModel):
    """Output of one layout pass."""
    nodes: List[PlacedNode] = Field(default_factory=list)
    connectors: List[Connector] = Field(default_factory=list)
    bounds: Bounds = Field(default_factory=Bounds)
    view: ViewState = Field(default_factory=ViewState)


class ExportOptions(BaseModel):
    """Model for export configuration."""
    format: str = "png"  # png, jpg, pdf
    width: int = 1920
    height: int = 1080
    quality: int = 90  # For JPG
    page_size: str = "A4"  # For PDF: A4, Letter, Legal, A3
    orientation: str = "landscape"  # portrait, landscape
