"""
Текстовое представление чисел и параметров – общее для PrintTarget
и сериализатора. Вывод детерминирован.
"""

from pbrtscene.scene.properties import Property, FLOATS, INTS, BOOLS

LONG_VALUES = 16


def format_number(v) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, int):
        return str(v)
    v = float(v)
    if v == 0.0:
        return "0"
    return f"{v:.9g}"


def format_values(prop: Property, omit_long: bool = False) -> str:
    if omit_long and len(prop) > LONG_VALUES:
        return f"[ ... {len(prop)} values ... ]"
    if prop.kind in (FLOATS, INTS):
        body = " ".join(format_number(v) for v in prop)
    elif prop.kind == BOOLS:
        body = " ".join(f'"{format_number(v)}"' for v in prop)
    else:
        body = " ".join(f'"{v}"' for v in prop)
    return f"[{body}]"


def format_param(key_type: str, key_name: str, prop: Property, omit_long: bool = False) -> str:
    return f' "{key_type} {key_name}" {format_values(prop, omit_long)}'


def format_params(params, omit_long: bool = False) -> str:
    if params is None:
        return ""
    return "".join(format_param(t, n, v, omit_long) for t, n, v in params)
