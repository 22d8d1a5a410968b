# pbrtscene/targets/printer.py
# ---------------------------------------------------------------
# PrintTarget – восстанавливает текст директив из вызовов.
# Отступ растёт после каждого *Begin и уменьшается перед *End.
# ---------------------------------------------------------------
import sys

from pbrtscene.parse.formatting import format_number, format_params
from pbrtscene.parse.target import ParseTarget

INDENT = "    "


class PrintTarget(ParseTarget):

    def __init__(self, stream=None, omit_long_values: bool = False):
        self.stream = stream if stream is not None else sys.stdout
        self.omit_long_values = omit_long_values
        self.indent = 0

    # ----------------- вывод -----------------
    def _write(self, text: str) -> None:
        self.stream.write(f"{INDENT * self.indent}{text}\n")

    def _begin(self, text: str) -> None:
        self._write(text)
        self.indent += 1

    def _end(self, text: str) -> None:
        self.indent = max(0, self.indent - 1)
        self._write(text)

    def _numbers(self, *values) -> str:
        return " ".join(format_number(v) for v in values)

    def _params(self, params) -> str:
        return format_params(params, self.omit_long_values)

    def _typed(self, directive: str, name: str, params) -> None:
        self._write(f'{directive} "{name}"{self._params(params)}')

    # ----------------- ParseTarget -----------------
    def cleanup(self):
        self.stream.flush()

    def identity(self):
        self._write("Identity")

    def translate(self, dx, dy, dz):
        self._write(f"Translate {self._numbers(dx, dy, dz)}")

    def rotate(self, angle, ax, ay, az):
        self._write(f"Rotate {self._numbers(angle, ax, ay, az)}")

    def scale(self, sx, sy, sz):
        self._write(f"Scale {self._numbers(sx, sy, sz)}")

    def look_at(self, ex, ey, ez, lx, ly, lz, ux, uy, uz):
        self._write(f"LookAt {self._numbers(ex, ey, ez)}  "
                    f"{self._numbers(lx, ly, lz)}  {self._numbers(ux, uy, uz)}")

    def concat_transform(self, values):
        self._write(f"ConcatTransform [{self._numbers(*values)}]")

    def transform(self, values):
        self._write(f"Transform [{self._numbers(*values)}]")

    def coordinate_system(self, name):
        self._write(f'CoordinateSystem "{name}"')

    def coord_sys_transform(self, name):
        self._write(f'CoordSysTransform "{name}"')

    def active_transform_all(self):
        self._write("ActiveTransform All")

    def active_transform_end_time(self):
        self._write("ActiveTransform EndTime")

    def active_transform_start_time(self):
        self._write("ActiveTransform StartTime")

    def transform_times(self, start, end):
        self._write(f"TransformTimes {self._numbers(start, end)}")

    def pixel_filter(self, name, params):
        self._typed("PixelFilter", name, params)

    def film(self, name, params):
        self._typed("Film", name, params)

    def sampler(self, name, params):
        self._typed("Sampler", name, params)

    def accelerator(self, name, params):
        self._typed("Accelerator", name, params)

    def integrator(self, name, params):
        self._typed("Integrator", name, params)

    def camera(self, name, params):
        self._typed("Camera", name, params)

    def make_named_medium(self, name, params):
        self._typed("MakeNamedMedium", name, params)

    def medium_interface(self, inside_name, outside_name):
        self._write(f'MediumInterface "{inside_name}" "{outside_name}"')

    def world_begin(self):
        self._begin("WorldBegin")

    def attribute_begin(self):
        self._begin("AttributeBegin")

    def attribute_end(self):
        self._end("AttributeEnd")

    def transform_begin(self):
        self._begin("TransformBegin")

    def transform_end(self):
        self._end("TransformEnd")

    def texture(self, name, color_type, tex_type, params):
        self._write(f'Texture "{name}" "{color_type}" "{tex_type}"{self._params(params)}')

    def material(self, name, params):
        self._typed("Material", name, params)

    def make_named_material(self, name, params):
        self._typed("MakeNamedMaterial", name, params)

    def named_material(self, name):
        self._write(f'NamedMaterial "{name}"')

    def light_source(self, name, params):
        self._typed("LightSource", name, params)

    def area_light_source(self, name, params):
        self._typed("AreaLightSource", name, params)

    def shape(self, name, params):
        self._typed("Shape", name, params)

    def reverse_orientation(self):
        self._write("ReverseOrientation")

    def object_begin(self, name):
        self._begin(f'ObjectBegin "{name}"')

    def object_end(self):
        self._end("ObjectEnd")

    def object_instance(self, name):
        self._write(f'ObjectInstance "{name}"')

    def world_end(self):
        self._end("WorldEnd")

    def parse_file(self, filename):
        from pbrtscene.parse.parser import pbrt_parse_file
        pbrt_parse_file(filename, self)

    def parse_string(self, text):
        from pbrtscene.parse.parser import pbrt_parse_string
        pbrt_parse_string(text, self)

    def work_dir_begin(self, path):
        self._begin(f'WorkDirBegin "{path}"')

    def work_dir_end(self):
        self._end("WorkDirEnd")

    def include(self, filename, params):
        self._write(f'Include "{filename}"{self._params(params)}')
