# pbrtscene/parse/grammar.py
# ---------------------------------------------------------------
# Грамматика формата сцены (lark, LALR) и таблица арностей директив.
# ---------------------------------------------------------------

VOID_DIRECTIVES = (
    "Identity", "WorldBegin", "WorldEnd", "AttributeBegin", "AttributeEnd",
    "TransformBegin", "TransformEnd", "ReverseOrientation", "ObjectEnd",
    "WorkDirEnd",
)
FIXED_FLOAT_DIRECTIVES = {
    "Translate": 3,
    "Scale": 3,
    "Rotate": 4,
    "LookAt": 9,
    "TransformTimes": 2,
}
FLOAT_ARRAY_DIRECTIVES = ("Transform", "ConcatTransform")
SINGLE_STRING_DIRECTIVES = (
    "CoordinateSystem", "CoordSysTransform", "NamedMaterial",
    "ObjectBegin", "ObjectInstance", "WorkDirBegin",
)
STRING_PAIR_DIRECTIVES = ("MediumInterface",)
STRING_PARAMS_DIRECTIVES = (
    "Camera", "Film", "Sampler", "Accelerator", "Integrator", "PixelFilter",
    "MakeNamedMedium", "Material", "MakeNamedMaterial", "LightSource",
    "AreaLightSource", "Shape", "Include",
)
THREE_STRINGS_PARAMS_DIRECTIVES = ("Texture",)
ACTIVE_TRANSFORM_KINDS = ("All", "StartTime", "EndTime")

ALL_DIRECTIVES = (
    VOID_DIRECTIVES
    + tuple(FIXED_FLOAT_DIRECTIVES)
    + FLOAT_ARRAY_DIRECTIVES
    + SINGLE_STRING_DIRECTIVES
    + STRING_PAIR_DIRECTIVES
    + STRING_PARAMS_DIRECTIVES
    + THREE_STRINGS_PARAMS_DIRECTIVES
    + ("ActiveTransform",)
)


# имя правила lark (нижний регистр) -> (класс арности, имя директивы)
RULE_TO_DIRECTIVE = {}


def _rule(arity_class: str, name: str) -> str:
    rule = f"{arity_class}_{name.lower()}"
    RULE_TO_DIRECTIVE[rule] = (arity_class, name)
    return rule


def _build_grammar() -> str:
    lines = []
    lines += [f'"{n}" -> {_rule("void", n)}' for n in VOID_DIRECTIVES]
    lines += [
        f'"{n}"' + " NUMBER" * arity + f' -> {_rule("fixed", n)}'
        for n, arity in FIXED_FLOAT_DIRECTIVES.items()
    ]
    lines += [f'"{n}" float_array -> {_rule("array", n)}' for n in FLOAT_ARRAY_DIRECTIVES]
    lines += [f'"{n}" STRING -> {_rule("string", n)}' for n in SINGLE_STRING_DIRECTIVES]
    lines += [f'"{n}" STRING STRING? -> {_rule("pair", n)}' for n in STRING_PAIR_DIRECTIVES]
    lines += [f'"{n}" STRING params -> {_rule("typed", n)}' for n in STRING_PARAMS_DIRECTIVES]
    lines += [
        f'"{n}" STRING STRING STRING params -> {_rule("texture", n)}'
        for n in THREE_STRINGS_PARAMS_DIRECTIVES
    ]
    lines.append(f'"ActiveTransform" ACTIVE_KIND -> {_rule("active", "ActiveTransform")}')
    statement = "\n          | ".join(lines)
    return PBRT_GRAMMAR_TEMPLATE.replace("%STATEMENTS%", statement)


PBRT_GRAMMAR_TEMPLATE = r"""
    start: statement*

    ?statement: %STATEMENTS%

    float_array: "[" NUMBER* "]"

    params: param*
    param: STRING value

    value: "[" item* "]"
         | item

    ?item: NUMBER
         | STRING
         | BOOL

    ACTIVE_KIND: "All" | "StartTime" | "EndTime"
    BOOL: "true" | "false"
    STRING: /"[^"\n]*"/
    NUMBER: /[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?/

    %import common.WS
    %ignore WS
"""

PBRT_GRAMMAR = _build_grammar()
