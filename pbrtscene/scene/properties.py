# pbrtscene/scene/properties.py
# ---------------------------------------------------------------
# Property  – типизированный список значений.
# PropertyMap – упорядоченный набор ("тип", "имя", Property).
# ---------------------------------------------------------------
from typing import Iterator, List, Optional, Tuple

FLOATS = "floats"
INTS = "ints"
BOOLS = "bools"
STRINGS = "strings"

STRING_TAGS = ("string", "texture", "spectrum")


def split_key(key: str) -> Tuple[str, str]:
    """'float roughness' -> ('float', 'roughness'); 'roughness' -> ('', 'roughness')."""
    parts = key.split()
    if len(parts) >= 2:
        return parts[0], parts[-1]
    if len(parts) == 1:
        return "", parts[0]
    return "", ""


def kind_for_tag(key_type: str) -> str:
    """Вид хранимых значений по тегу типа параметра."""
    if key_type in STRING_TAGS:
        return STRINGS
    if key_type == "bool":
        return BOOLS
    if key_type == "integer":
        return INTS
    return FLOATS


class Property:
    """Список значений одного вида. Длина значима: 1, 3, 16, N."""
    __slots__ = ("kind", "values")

    def __init__(self, kind: str, values=None):
        self.kind = kind
        self.values = list(values) if values is not None else []

    @classmethod
    def floats(cls, values) -> "Property":
        return cls(FLOATS, [float(v) for v in values])

    @classmethod
    def ints(cls, values) -> "Property":
        return cls(INTS, [int(v) for v in values])

    @classmethod
    def bools(cls, values) -> "Property":
        return cls(BOOLS, [bool(v) for v in values])

    @classmethod
    def strings(cls, values) -> "Property":
        return cls(STRINGS, [str(v) for v in values])

    @classmethod
    def from_tagged(cls, key_type: str, values) -> "Property":
        """
        Приводит сырые значения из парсера к виду, заданному тегом типа.
        Числовой 'spectrum' (пары длина волны/значение) хранится как floats.
        """
        kind = kind_for_tag(key_type)
        if kind == STRINGS:
            if key_type == "spectrum" and values and not any(isinstance(v, str) for v in values):
                return cls.floats(values)
            return cls.strings(values)
        if kind == BOOLS:
            return cls.bools(_to_bool(v) for v in values)
        if kind == INTS:
            return cls.ints(_to_int(v) for v in values)
        return cls.floats(values)

    def copy(self) -> "Property":
        return Property(self.kind, self.values)

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, idx):
        return self.values[idx]

    def __eq__(self, other):
        if not isinstance(other, Property):
            return NotImplemented
        return self.kind == other.kind and self.values == other.values

    def __repr__(self):
        return f"Property({self.kind}, {self.values})"


def _to_int(v) -> int:
    f = float(v)
    if not f.is_integer():
        raise ValueError(f"non-integral value for integer parameter: {v!r}")
    return int(f)


def _to_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        low = v.strip().strip('"').lower()
        if low in ("true", "false"):
            return low == "true"
        raise ValueError(f"invalid bool value: {v!r}")
    return bool(v)


class PropertyMap:
    """
    Упорядоченный ParamSet. Поиск по имени, тип из ключа отбрасывается.
    Повторная вставка заменяет тип и значение на том же месте.
    """

    def __init__(self, entries=None):
        self._entries: List[list] = []
        if entries:
            for key_type, key_name, value in entries:
                self.insert(f"{key_type} {key_name}", value)

    # ----------------- базовые операции -----------------
    def _index(self, name: str) -> int:
        for i, entry in enumerate(self._entries):
            if entry[1] == name:
                return i
        return -1

    def insert(self, key: str, value: Property) -> None:
        key_type, key_name = split_key(key)
        idx = self._index(key_name)
        if idx >= 0:
            entry = self._entries[idx]
            if key_type:
                entry[0] = key_type
            entry[2] = value
        else:
            self._entries.append([key_type, key_name, value])

    def get(self, key: str) -> Optional[Property]:
        idx = self._index(split_key(key)[1])
        return self._entries[idx][2] if idx >= 0 else None

    def entry(self, key: str) -> Optional[Tuple[str, str, Property]]:
        idx = self._index(split_key(key)[1])
        if idx < 0:
            return None
        key_type, key_name, value = self._entries[idx]
        return key_type, key_name, value

    def remove(self, key: str) -> bool:
        idx = self._index(split_key(key)[1])
        if idx < 0:
            return False
        del self._entries[idx]
        return True

    def keys(self) -> List[Tuple[str, str]]:
        return [(t, n) for t, n, _ in self._entries]

    def copy(self) -> "PropertyMap":
        pm = PropertyMap()
        pm._entries = [[t, n, v.copy()] for t, n, v in self._entries]
        return pm

    def update(self, other: "PropertyMap") -> None:
        for key_type, key_name, value in other:
            self.insert(f"{key_type} {key_name}", value.copy())

    def __contains__(self, key: str) -> bool:
        return self._index(split_key(key)[1]) >= 0

    def __len__(self):
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str, Property]]:
        for key_type, key_name, value in self._entries:
            yield key_type, key_name, value

    def __eq__(self, other):
        if not isinstance(other, PropertyMap):
            return NotImplemented
        return [tuple(e) for e in self._entries] == [tuple(e) for e in other._entries]

    def __repr__(self):
        body = ", ".join(f'"{t} {n}": {v.values}' for t, n, v in self._entries)
        return f"PropertyMap({{{body}}})"

    # ----------------- типизированные добавления -----------------
    def add_floats(self, key: str, values) -> None:
        self.insert(key, Property.floats(values))

    def add_ints(self, key: str, values) -> None:
        self.insert(key, Property.ints(values))

    def add_bools(self, key: str, values) -> None:
        self.insert(key, Property.bools(values))

    def add_strings(self, key: str, values) -> None:
        self.insert(key, Property.strings(values))

    def add_float(self, key: str, value: float) -> None:
        self.add_floats(key, [value])

    def add_int(self, key: str, value: int) -> None:
        self.add_ints(key, [value])

    def add_bool(self, key: str, value: bool) -> None:
        self.add_bools(key, [value])

    def add_string(self, key: str, value: str) -> None:
        self.add_strings(key, [value])

    # ----------------- типизированные чтения -----------------
    def _values(self, key: str, kind: str):
        value = self.get(key)
        if value is None or value.kind != kind:
            return None
        return list(value.values)

    def get_floats(self, key: str) -> Optional[List[float]]:
        return self._values(key, FLOATS)

    def get_ints(self, key: str) -> Optional[List[int]]:
        return self._values(key, INTS)

    def get_bools(self, key: str) -> Optional[List[bool]]:
        return self._values(key, BOOLS)

    def get_strings(self, key: str) -> Optional[List[str]]:
        return self._values(key, STRINGS)

    def _find_one(self, key: str, kind: str):
        values = self._values(key, kind)
        return values[0] if values else None

    def find_one_float(self, key: str) -> Optional[float]:
        return self._find_one(key, FLOATS)

    def find_one_int(self, key: str) -> Optional[int]:
        return self._find_one(key, INTS)

    def find_one_bool(self, key: str) -> Optional[bool]:
        return self._find_one(key, BOOLS)

    def find_one_string(self, key: str) -> Optional[str]:
        return self._find_one(key, STRINGS)
