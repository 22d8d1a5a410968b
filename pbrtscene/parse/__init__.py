"""
Разбор формата сцены: удаление комментариев, Include, грамматика,
записи директив и интерфейс ParseTarget.
"""

from pbrtscene.parse.comments import remove_comments
from pbrtscene.parse.directive import Directive
from pbrtscene.parse.formatting import format_number, format_values, format_params
from pbrtscene.parse.target import ParseTarget
from pbrtscene.parse.read_file import read_file_with_include, read_file_without_include
from pbrtscene.parse.parser import (
    parse_string,
    evaluate_directives,
    pbrt_parse_string,
    pbrt_parse_file,
    pbrt_parse_file_without_include,
)

__all__ = [
    "remove_comments", "Directive", "ParseTarget",
    "format_number", "format_values", "format_params",
    "read_file_with_include", "read_file_without_include",
    "parse_string", "evaluate_directives", "pbrt_parse_string",
    "pbrt_parse_file", "pbrt_parse_file_without_include",
]
