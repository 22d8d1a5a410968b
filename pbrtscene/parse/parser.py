# pbrtscene/parse/parser.py
# ---------------------------------------------------------------
# Текст -> список Directive (lark) -> вызовы ParseTarget.
# ---------------------------------------------------------------
import os
import tarfile
import tempfile
from pathlib import Path
from typing import Callable, Dict, List

from lark import Lark, Transformer, Token
from lark.exceptions import UnexpectedInput, UnexpectedEOF, VisitError

from pbrtscene.errors import PbrtError, PbrtSyntaxError
from pbrtscene.parse.comments import remove_comments
from pbrtscene.parse.directive import Directive
from pbrtscene.parse.grammar import PBRT_GRAMMAR, RULE_TO_DIRECTIVE
from pbrtscene.parse.read_file import read_file_with_include, read_file_without_include
from pbrtscene.parse.target import ParseTarget
from pbrtscene.scene.properties import Property, PropertyMap, split_key
from pbrtscene.utils.logger import logger
from pbrtscene.utils.profiler import Profiler

_PARSER = None


def get_parser() -> Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = Lark(PBRT_GRAMMAR, parser="lalr", propagate_positions=True)
    return _PARSER


def _unquote(tok) -> str:
    return str(tok)[1:-1]


class DirectiveBuilder(Transformer):
    """Дерево lark -> Directive. Позиционные аргументы кладутся в PropertyMap."""

    def NUMBER(self, tok):
        return float(tok)

    def BOOL(self, tok):
        return str(tok) == "true"

    def float_array(self, items):
        return list(items)

    def value(self, items):
        return [_unquote(v) if isinstance(v, Token) and v.type == "STRING" else v for v in items]

    def param(self, items):
        key, values = items
        key = _unquote(key)
        key_type, key_name = split_key(key)
        if not key_type or len(key.split()) != 2:
            raise PbrtSyntaxError("Malformed parameter declaration", fragment=key)
        try:
            return key_type, key_name, Property.from_tagged(key_type, values)
        except (TypeError, ValueError) as exc:
            raise PbrtSyntaxError(f"Bad value for parameter '{key}': {exc}", fragment=key)

    def params(self, items):
        pm = PropertyMap()
        for key_type, key_name, value in items:
            pm.insert(f"{key_type} {key_name}", value)
        return pm

    def start(self, items):
        return list(items)

    def __default__(self, data, children, meta):
        if data not in RULE_TO_DIRECTIVE:
            return super().__default__(data, children, meta)
        arity_class, name = RULE_TO_DIRECTIVE[data]
        line = getattr(meta, "line", None) if not getattr(meta, "empty", True) else None
        args = PropertyMap()
        params = None
        if arity_class == "fixed":
            args.add_floats("float args", children)
        elif arity_class == "array":
            args.add_floats("float arg1", children[0])
        elif arity_class in ("string", "pair", "active"):
            for i, s in enumerate(children, start=1):
                args.add_string(f"string arg{i}", _unquote(s) if str(s).startswith('"') else str(s))
        elif arity_class == "typed":
            args.add_string("string arg1", _unquote(children[0]))
            params = children[1]
        elif arity_class == "texture":
            for i in range(3):
                args.add_string(f"string arg{i + 1}", _unquote(children[i]))
            params = children[3]
        else:
            args = None
        return Directive(name, args, params, line=line)


def _syntax_error(exc: UnexpectedInput, text: str) -> PbrtSyntaxError:
    if isinstance(exc, UnexpectedEOF):
        return PbrtSyntaxError("Unexpected end of input", fragment=text.rstrip()[-40:])
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)
    fragment = ""
    if line is not None and line > 0:
        src_line = text.splitlines()[line - 1] if line - 1 < len(text.splitlines()) else ""
        fragment = src_line[max(column - 1, 0):].strip() if column else src_line.strip()
    token = getattr(exc, "token", None)
    if not fragment and token is not None:
        fragment = str(token)
    return PbrtSyntaxError("Syntax error", fragment=fragment, line=line, column=column)


def parse_string(text: str) -> List[Directive]:
    """Разбирает весь текст целиком или бросает PbrtSyntaxError."""
    text = remove_comments(text)
    try:
        tree = get_parser().parse(text)
    except UnexpectedInput as exc:
        raise _syntax_error(exc, text) from None
    try:
        return DirectiveBuilder().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, PbrtError):
            raise exc.orig_exc from None
        raise


# ----------------------------------------------------------------------
# Диспетчеризация
# ----------------------------------------------------------------------
def _params(d: Directive) -> PropertyMap:
    return d.params if d.params is not None else PropertyMap()


def _active_transform(t: ParseTarget, d: Directive):
    kind = d.string(1)
    if kind == "All":
        t.active_transform_all()
    elif kind == "StartTime":
        t.active_transform_start_time()
    else:
        t.active_transform_end_time()


DISPATCH: Dict[str, Callable[[ParseTarget, Directive], None]] = {
    "Identity": lambda t, d: t.identity(),
    "Translate": lambda t, d: t.translate(*d.floats()),
    "Rotate": lambda t, d: t.rotate(*d.floats()),
    "Scale": lambda t, d: t.scale(*d.floats()),
    "LookAt": lambda t, d: t.look_at(*d.floats()),
    "ConcatTransform": lambda t, d: t.concat_transform(d.floats()),
    "Transform": lambda t, d: t.transform(d.floats()),
    "CoordinateSystem": lambda t, d: t.coordinate_system(d.string(1)),
    "CoordSysTransform": lambda t, d: t.coord_sys_transform(d.string(1)),
    "ActiveTransform": _active_transform,
    "TransformTimes": lambda t, d: t.transform_times(*d.floats()),
    "PixelFilter": lambda t, d: t.pixel_filter(d.string(1), _params(d)),
    "Film": lambda t, d: t.film(d.string(1), _params(d)),
    "Sampler": lambda t, d: t.sampler(d.string(1), _params(d)),
    "Accelerator": lambda t, d: t.accelerator(d.string(1), _params(d)),
    "Integrator": lambda t, d: t.integrator(d.string(1), _params(d)),
    "Camera": lambda t, d: t.camera(d.string(1), _params(d)),
    "MakeNamedMedium": lambda t, d: t.make_named_medium(d.string(1), _params(d)),
    "MediumInterface": lambda t, d: t.medium_interface(d.string(1), d.string(2) or d.string(1)),
    "WorldBegin": lambda t, d: t.world_begin(),
    "AttributeBegin": lambda t, d: t.attribute_begin(),
    "AttributeEnd": lambda t, d: t.attribute_end(),
    "TransformBegin": lambda t, d: t.transform_begin(),
    "TransformEnd": lambda t, d: t.transform_end(),
    "Texture": lambda t, d: t.texture(d.string(1), d.string(2), d.string(3), _params(d)),
    "Material": lambda t, d: t.material(d.string(1), _params(d)),
    "MakeNamedMaterial": lambda t, d: t.make_named_material(d.string(1), _params(d)),
    "NamedMaterial": lambda t, d: t.named_material(d.string(1)),
    "LightSource": lambda t, d: t.light_source(d.string(1), _params(d)),
    "AreaLightSource": lambda t, d: t.area_light_source(d.string(1), _params(d)),
    "Shape": lambda t, d: t.shape(d.string(1), _params(d)),
    "ReverseOrientation": lambda t, d: t.reverse_orientation(),
    "ObjectBegin": lambda t, d: t.object_begin(d.string(1)),
    "ObjectEnd": lambda t, d: t.object_end(),
    "ObjectInstance": lambda t, d: t.object_instance(d.string(1)),
    "WorldEnd": lambda t, d: t.world_end(),
    "WorkDirBegin": lambda t, d: t.work_dir_begin(d.string(1)),
    "WorkDirEnd": lambda t, d: t.work_dir_end(),
    "Include": lambda t, d: t.include(d.string(1), _params(d)),
}


def evaluate_directives(directives: List[Directive], target: ParseTarget) -> None:
    """Передаёт директивы цели строго по порядку."""
    for d in directives:
        handler = DISPATCH.get(d.name)
        if handler is None:
            raise PbrtSyntaxError("Unknown directive", fragment=d.name, line=d.line)
        handler(target, d)


def pbrt_parse_string(text: str, target: ParseTarget) -> None:
    directives = parse_string(text)
    evaluate_directives(directives, target)


# ----------------------------------------------------------------------
# Файлы и архивы
# ----------------------------------------------------------------------
ARCHIVE_SUFFIXES = (".tar.gz", ".tgz")
SCENE_SUFFIXES = (".pbrt", ".pbrt.gz")


def is_archive(path) -> bool:
    name = str(path).lower()
    return name.endswith(ARCHIVE_SUFFIXES)


def find_scene_file(root) -> Path:
    """Единственный файл сцены внутри каталога (самый неглубокий, если их несколько)."""
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for fn in sorted(filenames):
            if fn.lower().endswith(SCENE_SUFFIXES):
                found.append(Path(dirpath) / fn)
    if not found:
        raise PbrtError(f"No scene file found in archive extracted to {root}")
    found.sort(key=lambda p: (len(p.relative_to(root).parts), str(p)))
    if len(found) > 1:
        logger.warning(f"[Parser] Archive contains {len(found)} scene files, using {found[0].name}")
    return found[0]


def extract_archive(path) -> Path:
    """
    Распаковывает .tar.gz во временный каталог и возвращает путь к файлу сцены.
    Каталог не удаляется: ресурсы сцены ссылаются на файлы внутри него.
    """
    out_dir = Path(tempfile.mkdtemp(prefix="pbrtscene_"))
    with tarfile.open(path, "r:gz") as tar:
        if hasattr(tarfile, "data_filter"):
            tar.extractall(out_dir, filter="data")
        else:
            tar.extractall(out_dir)
    logger.info(f"[Parser] Extracted {path} to {out_dir}")
    return find_scene_file(out_dir)


def pbrt_parse_file(path, target: ParseTarget) -> None:
    """Файл сцены, *.pbrt.gz или архив *.tar.gz; Include раскрываются заранее."""
    if is_archive(path):
        path = extract_archive(path)
    with Profiler(f"parse {path}"):
        text = read_file_with_include(path)
        pbrt_parse_string(text, target)


def pbrt_parse_file_without_include(path, target: ParseTarget) -> None:
    """Include остаются директивами и уходят в target.include()."""
    text = read_file_without_include(path)
    directory = Path(path).resolve().parent
    target.work_dir_begin(directory.as_posix())
    pbrt_parse_string(text, target)
    target.work_dir_end()
