"""Запись директивы – результат разбора одного оператора."""

from typing import List, Optional

from pbrtscene.scene.properties import PropertyMap


class Directive:
    """
    name   – имя директивы ("Shape", "Translate", ...)
    args   – позиционные аргументы: "float args" для фиксированных чисел,
             "float arg1" для массива, "string arg1..arg3" для строк
    params – параметры вида "type name" [values] или None
    """
    __slots__ = ("name", "args", "params", "line")

    def __init__(self, name: str, args: Optional[PropertyMap] = None,
                 params: Optional[PropertyMap] = None, line: int = None):
        self.name = name
        self.args = args
        self.params = params
        self.line = line

    def floats(self) -> List[float]:
        if self.args is None:
            return []
        return self.args.get_floats("args") or self.args.get_floats("arg1") or []

    def string(self, index: int = 1) -> Optional[str]:
        if self.args is None:
            return None
        return self.args.find_one_string(f"arg{index}")

    def __repr__(self):
        return f"Directive({self.name!r}, args={self.args!r}, params={self.params!r})"
