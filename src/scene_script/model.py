"""Typed timeline model.

Everything here is immutable once built.  Field metadata carries the name the
field has in script text, which the export layer uses for its JSON keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Generic, Iterator, Mapping, Optional, Tuple, TypeVar


def script_field(name: str, **kwargs: Any) -> Any:
    return field(metadata={"script": name}, **kwargs)


def frozen_mapping(data: Mapping) -> Mapping:
    return MappingProxyType(dict(data))


class PropertyKind(str, Enum):
    APPEARANCE = "Appearance"
    CUSTOM_SCRIPT = "CustomScript"
    EQUIP_WEAPON = "EquipWeapon"
    FADE = "Fade"
    FADE_REGION = "FadeRegion"
    GROUND_SNAP = "GroundSnap"
    MOVE_SPLINE = "MoveSpline"
    MUSIC = "Music"
    SCALE = "Scale"
    SHEATHE = "Sheathe"
    TRANSFORM = "Transform"

    @classmethod
    def lookup(cls, name: str) -> Optional["PropertyKind"]:
        """Exact, case-sensitive lookup; None for unknown kinds."""
        try:
            return cls(name)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Geometry and identifiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Transform:
    position: Position = field(default_factory=Position)
    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0


@dataclass(frozen=True)
class CreatureID:
    id: int


@dataclass(frozen=True)
class FileDataID:
    id: int


@dataclass(frozen=True)
class GameObjectDisplayInfoID:
    id: int


@dataclass(frozen=True)
class ItemID:
    id: int


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppearanceEvent:
    """Appearance change.  Scripts set any subset of the fields."""

    creature_id: Optional[CreatureID] = script_field("creatureID", default=None)
    creature_display_set_index: Optional[int] = script_field(
        "creatureDisplaySetIndex", default=None
    )
    creature_display_info_id: Optional[int] = script_field(
        "creatureDisplayInfoID", default=None
    )
    file_data_id: Optional[FileDataID] = script_field("fileDataID", default=None)
    wmo_game_object_display_id: Optional[GameObjectDisplayInfoID] = script_field(
        "wmoGameObjectDisplayID", default=None
    )
    item_id: Optional[ItemID] = script_field("itemID", default=None)
    is_player_clone: Optional[bool] = script_field("isPlayerClone", default=None)
    is_player_clone_native: Optional[bool] = script_field(
        "isPlayerCloneNative", default=None
    )
    player_summon: Optional[bool] = script_field("playerSummon", default=None)
    player_group_index: Optional[int] = script_field("playerGroupIndex", default=None)
    smooth_phase: Optional[bool] = script_field("smoothPhase", default=None)


@dataclass(frozen=True)
class CustomScriptEvent:
    script: str = script_field("script")


@dataclass(frozen=True)
class EquipWeaponEvent:
    item_id: int = script_field("itemID")
    main_hand: bool = script_field("MainHand")
    off_hand: bool = script_field("OffHand")
    ranged: bool = script_field("Ranged")


@dataclass(frozen=True)
class FadeEvent:
    alpha: float = script_field("alpha")
    time: float = script_field("time")


@dataclass(frozen=True)
class FadeRegionEvent:
    enabled: bool = script_field("enabled")
    radius: float = script_field("radius")
    include_player: bool = script_field("includePlayer")
    exclude_players: bool = script_field("excludePlayers")
    exclude_non_players: bool = script_field("excludeNonPlayers")
    include_sounds: bool = script_field("includeSounds")
    include_wmos: bool = script_field("includeWMOs")


@dataclass(frozen=True)
class GroundSnapEvent:
    snap: bool = script_field("snap")


@dataclass(frozen=True)
class MusicEvent:
    sound_kit_id: int = script_field("soundKitID")


@dataclass(frozen=True)
class ScaleEvent:
    scale: float = script_field("scale")
    duration: float = script_field("duration")


@dataclass(frozen=True)
class SheatheEvent:
    is_sheathed: bool = script_field("isSheathed")
    is_ranged: bool = script_field("isRanged")
    animated: bool = script_field("animated")


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

E = TypeVar("E")


@dataclass(frozen=True)
class Property(Generic[E]):
    """Events of one kind keyed by time in seconds."""

    events: Mapping[float, E] = field(default_factory=lambda: frozen_mapping({}))

    def __post_init__(self) -> None:
        if not isinstance(self.events, MappingProxyType):
            object.__setattr__(self, "events", frozen_mapping(self.events))

    def times(self) -> list:
        return sorted(self.events)


@dataclass(frozen=True)
class MoveSplineProperty(Property[Transform]):
    """Spline nodes keyed by time plus one flat block of movement flags."""

    override_speed: float = script_field("overrideSpeed", default=0.0)
    use_model_run_speed: bool = script_field("useModelRunSpeed", default=False)
    use_model_walk_speed: bool = script_field("useModelWalkSpeed", default=False)
    yaw_uses_spline_tangent: bool = script_field("yawUsesSplineTangent", default=False)
    yaw_uses_node_transform: bool = script_field("yawUsesNodeTransform", default=False)
    yaw_blend_disabled: bool = script_field("yawBlendDisabled", default=False)
    pitch_uses_spline_tangent: bool = script_field(
        "pitchUsesSplineTangent", default=False
    )
    pitch_uses_node_transform: bool = script_field(
        "pitchUsesNodeTransform", default=False
    )
    roll_uses_node_transform: bool = script_field(
        "rollUsesNodeTransform", default=False
    )


@dataclass(frozen=True)
class PropertySet:
    """At most one property of each kind."""

    appearance: Optional[Property[AppearanceEvent]] = None
    custom_script: Optional[Property[CustomScriptEvent]] = None
    equip_weapon: Optional[Property[EquipWeaponEvent]] = None
    fade: Optional[Property[FadeEvent]] = None
    fade_region: Optional[Property[FadeRegionEvent]] = None
    ground_snap: Optional[Property[GroundSnapEvent]] = None
    move_spline: Optional[MoveSplineProperty] = None
    music: Optional[Property[MusicEvent]] = None
    scale: Optional[Property[ScaleEvent]] = None
    sheathe: Optional[Property[SheatheEvent]] = None
    transform: Optional[Property[Transform]] = None

    @classmethod
    def from_kinds(cls, properties: Mapping[PropertyKind, Property]) -> "PropertySet":
        return cls(**{SLOT_NAMES[kind]: prop for kind, prop in properties.items()})

    def get(self, kind: PropertyKind) -> Optional[Property]:
        return getattr(self, SLOT_NAMES[kind])

    def present(self) -> Iterator[Tuple[PropertyKind, Property]]:
        for kind in PropertyKind:
            prop = self.get(kind)
            if prop is not None:
                yield kind, prop


SLOT_NAMES: Dict[PropertyKind, str] = {
    PropertyKind.APPEARANCE: "appearance",
    PropertyKind.CUSTOM_SCRIPT: "custom_script",
    PropertyKind.EQUIP_WEAPON: "equip_weapon",
    PropertyKind.FADE: "fade",
    PropertyKind.FADE_REGION: "fade_region",
    PropertyKind.GROUND_SNAP: "ground_snap",
    PropertyKind.MOVE_SPLINE: "move_spline",
    PropertyKind.MUSIC: "music",
    PropertyKind.SCALE: "scale",
    PropertyKind.SHEATHE: "sheathe",
    PropertyKind.TRANSFORM: "transform",
}


@dataclass(frozen=True)
class Actor:
    properties: PropertySet = field(default_factory=PropertySet)


@dataclass(frozen=True)
class Timeline:
    actors: Mapping[str, Actor] = field(default_factory=lambda: frozen_mapping({}))

    def __post_init__(self) -> None:
        if not isinstance(self.actors, MappingProxyType):
            object.__setattr__(self, "actors", frozen_mapping(self.actors))

    @classmethod
    def empty(cls) -> "Timeline":
        return cls()
