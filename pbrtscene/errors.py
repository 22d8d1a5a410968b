"""
Иерархия исключений pbrtscene.

Синтаксические ошибки фатальны для всего разбора, ошибка разложения
матрицы прерывает запись файла. Структурные предупреждения и ошибки
ресурсов исключениями не являются – они только логируются.
"""


class PbrtError(Exception):
    """Базовое исключение пакета."""


class PbrtSyntaxError(PbrtError):
    """Нераспознанная директива, неверная арность или лишний текст."""

    def __init__(self, message: str, fragment: str = "",
                 line: int = None, column: int = None):
        self.fragment = fragment
        self.line = line
        self.column = column
        where = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{where}: {fragment!r}" if fragment else f"{message}{where}")


class DecomposeError(PbrtError):
    """Матрицу нельзя разложить на T·R·S."""
