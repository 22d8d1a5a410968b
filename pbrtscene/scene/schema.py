"""
Реестр схем свойств: для каждой категории (material, light, shape, ...)
и каждого типа – список объявленных параметров с умолчаниями.

Реестр – обычный объект, его передают в SceneTarget и в сериализатор,
поэтому тесты могут подставить свои таблицы.
"""

from collections import namedtuple
from typing import Dict, List, Optional

from pbrtscene.scene.properties import Property, PropertyMap, kind_for_tag, FLOATS, INTS, BOOLS

PropertyEntry = namedtuple(
    "PropertyEntry", ["type_name", "key_type", "key_name", "default", "value_range"]
)

# категория для параметров, общих для любого типа (film)
ANY_TYPE = "*"

# (тип, тег, имя, умолчание, диапазон)
MATERIAL_PARAMETERS = (
    ("matte", "color", "Kd", "0.5 0.5 0.5", ""),
    ("matte", "float", "sigma", "0.0", ""),
    ("matte", "texture", "bumpmap", "", ""),
    ("plastic", "color", "Kd", "0.25 0.25 0.25", ""),
    ("plastic", "color", "Ks", "0.25 0.25 0.25", ""),
    ("plastic", "float", "roughness", "0.0", "0.0 1.0"),
    ("plastic", "texture", "bumpmap", "", ""),
    ("plastic", "bool", "remaproughness", "true", ""),
    ("translucent", "color", "Kd", "0.25 0.25 0.25", ""),
    ("translucent", "color", "Ks", "0.25 0.25 0.25", ""),
    ("translucent", "color", "reflect", "0.25 0.25 0.25", ""),
    ("translucent", "color", "transmit", "0.25 0.25 0.25", ""),
    ("translucent", "float", "roughness", "0.1", "0.0 1.0"),
    ("translucent", "texture", "bumpmap", "", ""),
    ("translucent", "bool", "remaproughness", "true", ""),
    ("glass", "color", "Kr", "1.0 1.0 1.0", ""),
    ("glass", "color", "Kt", "1.0 1.0 1.0", ""),
    ("glass", "color", "reflect", "0.0 0.0 0.0", ""),
    ("glass", "float", "uroughness", "0.0", "0.0 1.0"),
    ("glass", "float", "vroughness", "0.0", "0.0 1.0"),
    ("glass", "float", "eta", "1.5", "0.0 10.0"),
    ("glass", "texture", "bumpmap", "", ""),
    ("glass", "bool", "remaproughness", "true", ""),
    ("mirror", "color", "Kr", "0.9 0.9 0.9", ""),
    ("mirror", "texture", "bumpmap", "", ""),
    ("hair", "color", "sigma_a", "1.0 1.0 1.0", ""),
    ("hair", "color", "color", "0.0 0.0 0.0", ""),
    ("hair", "color", "eumelanin", "0.0 0.0 0.0", ""),
    ("hair", "color", "pheomelanin", "0.0 0.0 0.0", ""),
    ("hair", "float", "eta", "1.55", "0.0 10.0"),
    ("hair", "float", "beta_m", "0.3", ""),
    ("hair", "float", "beta_n", "0.3", ""),
    ("hair", "float", "alpha", "2.0", ""),
    ("mix", "color", "amount", "0.5 0.5 0.5", ""),
    ("mix", "string", "namedmaterial1", "", ""),
    ("mix", "string", "namedmaterial2", "", ""),
    ("metal", "spectrum", "eta", "", ""),
    ("metal", "spectrum", "k", "", ""),
    ("metal", "float", "roughness", "0.01", "0.0 1.0"),
    ("metal", "float", "uroughness", "0.0", "0.0 1.0"),
    ("metal", "float", "vroughness", "0.0", "0.0 1.0"),
    ("metal", "texture", "bumpmap", "", ""),
    ("metal", "bool", "remaproughness", "true", ""),
    ("substrate", "color", "Kd", "0.5 0.5 0.5", ""),
    ("substrate", "color", "Ks", "0.5 0.5 0.5", ""),
    ("substrate", "float", "uroughness", "0.1", "0.0 1.0"),
    ("substrate", "float", "vroughness", "0.1", "0.0 1.0"),
    ("substrate", "texture", "bumpmap", "", ""),
    ("substrate", "bool", "remaproughness", "true", ""),
    ("subsurface", "string", "name", "", ""),
    ("subsurface", "float", "scale", "1.0", ""),
    ("subsurface", "color", "Kr", "1.0 1.0 1.0", ""),
    ("subsurface", "color", "sigma_a", "0.0011 0.0024 0.014", ""),
    ("subsurface", "color", "sigma_s", "2.55 3.21 3.77", ""),
    ("subsurface", "float", "g", "0.0", ""),
    ("subsurface", "float", "eta", "1.33", "0.0 10.0"),
    ("subsurface", "float", "uroughness", "0.0", "0.0 1.0"),
    ("subsurface", "float", "vroughness", "0.0", "0.0 1.0"),
    ("subsurface", "texture", "bumpmap", "", ""),
    ("subsurface", "bool", "remaproughness", "true", ""),
    ("kdsubsurface", "float", "scale", "1.0", ""),
    ("kdsubsurface", "color", "Kd", "0.5 0.5 0.5", ""),
    ("kdsubsurface", "color", "Kr", "1.0 1.0 1.0", ""),
    ("kdsubsurface", "color", "Kt", "1.0 1.0 1.0", ""),
    ("kdsubsurface", "color", "mfp", "1.0 1.0 1.0", ""),
    ("kdsubsurface", "float", "g", "0.0", ""),
    ("kdsubsurface", "float", "eta", "1.33", "0.0 10.0"),
    ("kdsubsurface", "float", "uroughness", "0.0", "0.0 10.0"),
    ("kdsubsurface", "float", "vroughness", "0.0", "0.0 10.0"),
    ("kdsubsurface", "texture", "bumpmap", "", ""),
    ("kdsubsurface", "bool", "remaproughness", "true", ""),
    ("uber", "color", "Kd", "0.25 0.25 0.25", ""),
    ("uber", "color", "Ks", "0.25 0.25 0.25", ""),
    ("uber", "color", "Kr", "0.0 0.0 0.0", ""),
    ("uber", "color", "Kt", "0.0 0.0 0.0", ""),
    ("uber", "float", "roughness", "0.1", "0.0 1.0"),
    ("uber", "float", "uroughness", "0.1", "0.0 1.0"),
    ("uber", "float", "vroughness", "0.1", "0.0 1.0"),
    ("uber", "float", "eta", "1.5", "0.0 10.0"),
    ("uber", "texture", "bumpmap", "", ""),
    ("uber", "color", "opacity", "1.0 1.0 1.0", ""),
    ("uber", "bool", "remaproughness", "true", ""),
    ("fourier", "string", "bsdffile", "", ""),
    ("fourier", "texture", "bumpmap", "", ""),
    ("disney", "color", "color", "0.5 0.5 0.5", ""),
    ("disney", "float", "metallic", "0.0", ""),
    ("disney", "float", "eta", "1.5", "0.0 10.0"),
    ("disney", "float", "roughness", "0.5", "0.0 1.0"),
    ("disney", "float", "speculartint", "0.0", "0.0 1.0"),
    ("disney", "float", "anisotropic", "0.0", "0.0 1.0"),
    ("disney", "float", "sheen", "0.0", "0.0 1.0"),
    ("disney", "float", "sheentint", "0.5", "0.0 1.0"),
    ("disney", "float", "clearcoat", "0.0", "0.0 1.0"),
    ("disney", "float", "clearcoatgloss", "1.0", "0.0 1.0"),
    ("disney", "float", "spectrans", "0.0", "0.0 1.0"),
    ("disney", "color", "scatterdistance", "0.0 0.0 0.0", ""),
    ("disney", "bool", "thin", "false", ""),
    ("disney", "float", "flatness", "0.0", "0.0 1.0"),
    ("disney", "float", "difftrans", "1.0", "0.0 1.0"),
    ("disney", "texture", "bumpmap", "", ""),
)

CAMERA_PARAMETERS = (
    ("perspective", "float", "fov", "35.0", "0.0 90.0"),
    ("perspective", "float", "focaldistance", "1e6", "0.0 100000.0"),
    ("perspective", "float", "lensradius", "0.0", "0.0 100.0"),
    ("perspective", "float", "shutteropen", "0.0", "0.0 1.0"),
    ("perspective", "float", "shutterclose", "1.0", "0.0 1.0"),
    ("perspective", "float", "znear", "0.01", ""),
    ("perspective", "float", "zfar", "10000.0", ""),
    ("realistic", "string", "lensfile", "", ""),
    ("realistic", "float", "aperturediameter", "1.0", ""),
    ("realistic", "float", "focusdistance", "10.0", ""),
    ("realistic", "bool", "simpleweighting", "true", ""),
    ("orthographic", "float", "focaldistance", "1e6", ""),
    ("orthographic", "float", "lensradius", "0.0", ""),
    ("orthographic", "float", "shutteropen", "0.0", ""),
    ("orthographic", "float", "shutterclose", "1.0", ""),
    ("environment", "float", "focaldistance", "1e6", ""),
    ("environment", "float", "lensradius", "0.0", ""),
    ("environment", "float", "shutteropen", "0.0", ""),
    ("environment", "float", "shutterclose", "1.0", ""),
)

FILM_PARAMETERS = (
    (ANY_TYPE, "string", "filename", "", ""),
    (ANY_TYPE, "integer", "xresolution", "1280", ""),
    (ANY_TYPE, "integer", "yresolution", "720", ""),
    (ANY_TYPE, "float", "cropwindow", "0.0 1.0 0.0 1.0", ""),
    (ANY_TYPE, "float", "scale", "1.0", ""),
    (ANY_TYPE, "float", "diagonal", "35.0", ""),
)

SAMPLER_PARAMETERS = (
    ("lowdiscrepancy", "integer", "pixelsamples", "16", "1 1000000"),
    ("lowdiscrepancy", "integer", "dimensions", "4", ""),
    ("maxmindist", "integer", "pixelsamples", "16", "1 1000000"),
    ("maxmindist", "integer", "dimensions", "4", ""),
    ("halton", "integer", "pixelsamples", "16", "1 1000000"),
    ("halton", "bool", "samplepixelcenter", "false", ""),
    ("sobol", "integer", "pixelsamples", "16", "1 1000000"),
    ("random", "integer", "pixelsamples", "4", "1 1000000"),
    ("stratified", "bool", "jitter", "true", ""),
    ("stratified", "integer", "xsamples", "4", "1 1000000"),
    ("stratified", "integer", "ysamples", "4", "1 1000000"),
    ("stratified", "integer", "dimensions", "4", ""),
)

INTEGRATOR_PARAMETERS = (
    ("whitted", "integer", "maxdepth", "5", "1 10"),
    ("directlighting", "integer", "maxdepth", "5", "1 10"),
    ("directlighting", "string", "strategy", "all", ""),
    ("path", "integer", "maxdepth", "5", "1 10"),
    ("path", "string", "lightsamplestrategy", "spatial", ""),
    ("path", "float", "rrthreshold", "1.0", ""),
    ("volpath", "integer", "maxdepth", "5", "1 10"),
    ("volpath", "string", "lightsamplestrategy", "spatial", ""),
    ("volpath", "float", "rrthreshold", "1.0", ""),
    ("bdpt", "integer", "maxdepth", "5", "1 10"),
    ("bdpt", "string", "lightsamplestrategy", "power", ""),
    ("mlt", "integer", "maxdepth", "5", "1 10"),
    ("mlt", "integer", "mutationsperpixel", "100", "1 1000000"),
    ("mlt", "integer", "chains", "1000", "1 1000000"),
    ("mlt", "float", "largestepprobability", "0.3", "0.0 1.0"),
    ("mlt", "float", "sigma", "0.01", ""),
    ("ambientocclusion", "integer", "nsamples", "64", "1 1000000"),
    ("ambientocclusion", "bool", "cossample", "true", ""),
    ("sppm", "integer", "maxdepth", "5", "1 10"),
    ("sppm", "integer", "numiterations", "64", "1 1000000"),
    ("sppm", "integer", "photonsperiteration", "-1", ""),
    ("sppm", "float", "radius", "1.0", "0.0 1000000"),
)

ACCELERATOR_PARAMETERS = (
    ("bvh", "string", "splitmethod", "middle", ""),
    ("bvh", "integer", "maxnodeprims", "4", "1 100"),
    ("kdtree", "integer", "intersectcost", "80", "0 100"),
    ("kdtree", "integer", "traversalcost", "1", "0 100"),
    ("kdtree", "float", "emptybonus", "0.5", "0.0 1.0"),
    ("kdtree", "integer", "maxprims", "1", "1 100"),
    ("kdtree", "integer", "maxdepth", "-1", ""),
)

SHAPE_PARAMETERS = (
    ("trianglemesh", "integer", "indices", "", ""),
    ("trianglemesh", "point", "P", "", ""),
    ("trianglemesh", "normal", "N", "", ""),
    ("trianglemesh", "vector", "S", "", ""),
    ("trianglemesh", "float", "uv", "", ""),
    ("trianglemesh", "bool", "twosided", "true", ""),
    ("trianglemesh", "float", "alpha", "1.0", ""),
    ("trianglemesh", "float", "shadowalpha", "1.0", ""),
    ("plymesh", "string", "filename", "", ""),
    ("plymesh", "float", "alpha", "1.0", ""),
    ("plymesh", "bool", "twosided", "true", ""),
    ("plymesh", "float", "shadowalpha", "1.0", ""),
    ("sphere", "float", "radius", "1.0", "0.0 1000.0"),
    ("sphere", "float", "zmin", "-1.0", "-1000.0 0.0"),
    ("sphere", "float", "zmax", "1.0", "0.0 100.0"),
    ("sphere", "float", "phimax", "360.0", "0.0 360.0"),
    ("disk", "float", "height", "0.0", "0.0 1000.0"),
    ("disk", "float", "radius", "1.0", "0.0 1000.0"),
    ("disk", "float", "innerradius", "0.0", "0.0 100.0"),
    ("disk", "float", "phimax", "360.0", "0.0 360.0"),
    ("cylinder", "float", "radius", "1.0", "0.0 1000.0"),
    ("cylinder", "float", "zmin", "-1.0", "-1000.0 0.0"),
    ("cylinder", "float", "zmax", "1.0", "0.0 1000.0"),
    ("cylinder", "float", "phimax", "360.0", "0.0 360.0"),
    ("cone", "float", "height", "1.0", "0.0 1000.0"),
    ("cone", "float", "radius", "1.0", "0.0 1000.0"),
    ("cone", "float", "phimax", "360.0", "0.0 360.0"),
    ("paraboloid", "float", "radius", "1.0", "0.0 1000.0"),
    ("paraboloid", "float", "zmin", "0.0", "0.0 1000.0"),
    ("paraboloid", "float", "zmax", "1.0", "0.0 1000.0"),
    ("paraboloid", "float", "phimax", "360.0", "0.0 360.0"),
    ("hyperboloid", "point", "p1", "1.0 1.0 1.0", ""),
    ("hyperboloid", "point", "p2", "0.0 0.0 0.0", ""),
    ("hyperboloid", "float", "phimax", "360.0", "0.0 360.0"),
    ("loopsubdiv", "integer", "nlevels", "3", ""),
    ("loopsubdiv", "integer", "indices", "", ""),
    ("loopsubdiv", "point", "P", "", ""),
    ("loopsubdiv", "string", "scheme", "loop", ""),
)

LIGHT_PARAMETERS = (
    ("point", "color", "I", "1.0 1.0 1.0", ""),
    ("point", "color", "scale", "1.0 1.0 1.0", ""),
    ("point", "point", "from", "0.0 0.0 0.0", ""),
    ("spot", "color", "I", "1.0 1.0 1.0", ""),
    ("spot", "color", "scale", "1.0 1.0 1.0", ""),
    ("spot", "float", "coneangle", "30.0", "0.0 90.0"),
    ("spot", "float", "conedeltaangle", "5.0", "0.0 90.0"),
    ("spot", "point", "from", "0.0 0.0 0.0", ""),
    ("spot", "point", "to", "0.0 0.0 1.0", ""),
    ("goniometric", "color", "L", "1.0 1.0 1.0", ""),
    ("goniometric", "color", "scale", "1.0 1.0 1.0", ""),
    ("goniometric", "texture", "mapname", "", ""),
    ("projection", "color", "I", "1.0 1.0 1.0", ""),
    ("projection", "color", "scale", "1.0 1.0 1.0", ""),
    ("projection", "float", "fov", "45.0", "0.0 90.0"),
    ("distant", "color", "L", "1.0 1.0 1.0", ""),
    ("distant", "color", "scale", "1.0 1.0 1.0", ""),
    ("infinite", "color", "L", "1.0 1.0 1.0", ""),
    ("infinite", "color", "scale", "1.0 1.0 1.0", ""),
    ("infinite", "texture", "mapname", "", ""),
    ("infinite", "integer", "nsamples", "1", "1 100000"),
    ("diffuse", "color", "L", "1.0 1.0 1.0", ""),
    ("diffuse", "color", "scale", "1.0 1.0 1.0", ""),
    ("diffuse", "integer", "nsamples", "1", "1 100000"),
    ("diffuse", "bool", "twosided", "false", ""),
    ("diffuse", "float", "coneangle", "90.0", "0.0 90.0"),
    ("diffuse", "float", "conedeltaangle", "90.0", "0.0 90.0"),
)

TEXTURE_PARAMETERS = (
    ("imagemap", "string", "filename", "", ""),
    ("imagemap", "float", "maxanisotropy", "8.0", ""),
    ("imagemap", "bool", "trilinear", "false", ""),
    ("imagemap", "string", "wrap", "repeat", ""),
    ("imagemap", "float", "scale", "1.0", ""),
    ("imagemap", "bool", "gamma", "false", ""),
    ("constant", "color", "value", "1.0 1.0 1.0", ""),
    ("scale", "texture", "tex1", "", ""),
    ("scale", "texture", "tex2", "", ""),
    ("mix", "texture", "tex1", "", ""),
    ("mix", "texture", "tex2", "", ""),
    ("mix", "float", "amount", "0.5", ""),
    ("bilerp", "float", "v00", "0.0", ""),
    ("bilerp", "float", "v01", "1.0", ""),
    ("bilerp", "float", "v10", "0.0", ""),
    ("bilerp", "float", "v11", "1.0", ""),
    ("checkerboard", "color", "tex1", "1.0 1.0 1.0", ""),
    ("checkerboard", "color", "tex2", "0.0 0.0 0.0", ""),
    ("checkerboard", "integer", "dimension", "2", ""),
    ("checkerboard", "string", "aamode", "closedform", ""),
    ("dots", "color", "tex1", "1.0 1.0 1.0", ""),
    ("dots", "color", "tex2", "0.0 0.0 0.0", ""),
    ("fbm", "integer", "octaves", "8", ""),
    ("fbm", "float", "roughness", "0.5", ""),
    ("wrinkled", "integer", "octaves", "8", ""),
    ("wrinkled", "float", "roughness", "0.5", ""),
    ("marble", "integer", "octaves", "8", ""),
    ("marble", "float", "roughness", "0.5", ""),
    ("marble", "float", "scale", "1.0", ""),
    ("marble", "float", "variation", "0.2", ""),
)

# добавляется к каждому типу текстуры
TEXTURE_MAPPING_PARAMETERS = (
    ("string", "mapping", "uv", ""),
)

MAPPING_PARAMETERS = (
    ("uv", "float", "uscale", "1.0", "0.0 100.0"),
    ("uv", "float", "vscale", "1.0", "0.0 100.0"),
    ("uv", "float", "udelta", "0.0", "0.0 100.0"),
    ("uv", "float", "vdelta", "0.0", "0.0 100.0"),
    ("planar", "vector", "v1", "1.0 0.0 0.0", ""),
    ("planar", "vector", "v2", "0.0 0.0 0.0", ""),
    ("planar", "float", "udelta", "0.0", "0.0 100.0"),
    ("planar", "float", "vdelta", "0.0", "0.0 100.0"),
)

CATEGORIES = ("material", "camera", "film", "sampler", "integrator",
              "accelerator", "shape", "light", "texture", "mapping")


def parse_default(key_type: str, text: str) -> Optional[Property]:
    """Строка умолчания из таблицы -> Property (None, если умолчания нет)."""
    tokens = text.split()
    if not tokens:
        return None
    kind = kind_for_tag(key_type)
    if kind == FLOATS:
        return Property.floats(float(t) for t in tokens)
    if kind == INTS:
        return Property.ints(int(t) for t in tokens)
    if kind == BOOLS:
        return Property.bools(t == "true" for t in tokens)
    return Property.strings(tokens)


def _parse_range(text: str):
    tokens = text.split()
    if len(tokens) != 2:
        return None
    return float(tokens[0]), float(tokens[1])


class PropertySchema:
    """Таблицы объявленных параметров по категориям и типам."""

    def __init__(self):
        self._tables: Dict[str, Dict[str, List[PropertyEntry]]] = {c: {} for c in CATEGORIES}

    def register(self, category: str, type_name: str, entries) -> None:
        """entries – iterable из (tag, name, default, range) или PropertyEntry."""
        table = self._tables.setdefault(category, {})
        bucket = table.setdefault(type_name, [])
        for e in entries:
            if isinstance(e, PropertyEntry):
                bucket.append(e)
                continue
            key_type, key_name, default, value_range = e
            if isinstance(default, str) or default is None:
                default = parse_default(key_type, default or "")
            if isinstance(value_range, str):
                value_range = _parse_range(value_range)
            bucket.append(PropertyEntry(type_name, key_type, key_name, default, value_range))

    def register_rows(self, category: str, rows) -> None:
        for type_name, key_type, key_name, default, value_range in rows:
            self.register(category, type_name, [(key_type, key_name, default, value_range)])

    def get(self, category: str, type_name: str) -> Optional[List[PropertyEntry]]:
        table = self._tables.get(category, {})
        if type_name in table:
            return list(table[type_name])
        if ANY_TYPE in table:
            return list(table[ANY_TYPE])
        return None

    def types(self, category: str) -> List[str]:
        return [t for t in self._tables.get(category, {}) if t != ANY_TYPE]

    def defaults(self, category: str, type_name: str) -> PropertyMap:
        pm = PropertyMap()
        for e in self.get(category, type_name) or []:
            if e.default is not None:
                pm.insert(f"{e.key_type} {e.key_name}", e.default.copy())
        return pm


def default_schema() -> PropertySchema:
    """Новый реестр со встроенными таблицами."""
    schema = PropertySchema()
    schema.register_rows("material", MATERIAL_PARAMETERS)
    schema.register_rows("camera", CAMERA_PARAMETERS)
    schema.register_rows("film", FILM_PARAMETERS)
    schema.register_rows("sampler", SAMPLER_PARAMETERS)
    schema.register_rows("integrator", INTEGRATOR_PARAMETERS)
    schema.register_rows("accelerator", ACCELERATOR_PARAMETERS)
    schema.register_rows("shape", SHAPE_PARAMETERS)
    schema.register_rows("light", LIGHT_PARAMETERS)
    schema.register_rows("texture", TEXTURE_PARAMETERS)
    for type_name in dict.fromkeys(row[0] for row in TEXTURE_PARAMETERS):
        schema.register("texture", type_name, TEXTURE_MAPPING_PARAMETERS)
    schema.register_rows("mapping", MAPPING_PARAMETERS)
    return schema
