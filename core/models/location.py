# core/models/location.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.utils.validator import is_number, validate_coordinates

CURRENT_LOCATION_NAME = "Текущее местоположение"


@dataclass(frozen=True)
class Location:
    name: str
    lat: float
    lon: float

    @property
    def key(self) -> Tuple[float, float]:
        """Идентичность локации — пара (lat, lon), имя не учитывается."""
        return (self.lat, self.lon)

    def same_place(self, other: Optional["Location"]) -> bool:
        return other is not None and self.key == other.key

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "lat": self.lat, "lon": self.lon}

    @classmethod
    def from_dict(cls, data: Any) -> "Location":
        """Строгий разбор: при неверной структуре — ValueError."""
        if not isinstance(data, dict):
            raise ValueError(f"Локация должна быть объектом, получено: {type(data).__name__}")
        name, lat, lon = data.get("name"), data.get("lat"), data.get("lon")
        if not isinstance(name, str):
            raise ValueError(f"Некорректное имя локации: {name!r}")
        if not is_number(lat) or not is_number(lon):
            raise ValueError(f"Некорректные координаты: lat={lat!r}, lon={lon!r}")
        if not validate_coordinates(lat, lon):
            raise ValueError(f"Координаты вне диапазона: lat={lat}, lon={lon}")
        return cls(name=name, lat=float(lat), lon=float(lon))


@dataclass
class LocationSet:
    """Текущее местоположение (необязательно) + упорядоченный список добавленных городов."""
    current: Optional[Location] = None
    tracked: List[Location] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.current is None and not self.tracked

    def copy(self) -> "LocationSet":
        return LocationSet(current=self.current, tracked=list(self.tracked))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict() if self.current else None,
            "tracked": [loc.to_dict() for loc in self.tracked],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "LocationSet":
        if not isinstance(data, dict):
            raise ValueError("Состояние должно быть объектом")
        raw_current = data.get("current")
        current = Location.from_dict(raw_current) if raw_current is not None else None
        # "cities": ключ старого формата
        raw_tracked = data.get("tracked", data.get("cities", []))
        if raw_tracked is None:
            raw_tracked = []
        if not isinstance(raw_tracked, list):
            raise ValueError("Список локаций должен быть массивом")
        return cls(current=current, tracked=[Location.from_dict(item) for item in raw_tracked])


@dataclass(frozen=True)
class Candidate:
    """Результат геокодинга для списка подсказок."""
    name: str
    lat: float
    lon: float
    region: Optional[str] = None
    country: Optional[str] = None

    @property
    def label(self) -> str:
        parts = [self.name]
        if self.region:
            parts.append(self.region)
        if self.country:
            parts.append(self.country)
        return ", ".join(parts)

    def to_location(self) -> Location:
        return Location(name=self.name, lat=self.lat, lon=self.lon)
