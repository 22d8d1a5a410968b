"""Цель‑разветвитель: каждый вызов уходит во все вложенные цели по порядку."""

from typing import List

from pbrtscene.parse.target import ParseTarget


class MultipleTarget(ParseTarget):

    def __init__(self, targets=None):
        self.targets: List[ParseTarget] = list(targets) if targets else []

    def add_target(self, target: ParseTarget) -> None:
        self.targets.append(target)

    def __len__(self):
        return len(self.targets)

    def _forward(self, method: str, *args) -> None:
        for t in self.targets:
            getattr(t, method)(*args)

    def cleanup(self):
        self._forward("cleanup")

    def identity(self):
        self._forward("identity")

    def translate(self, dx, dy, dz):
        self._forward("translate", dx, dy, dz)

    def rotate(self, angle, ax, ay, az):
        self._forward("rotate", angle, ax, ay, az)

    def scale(self, sx, sy, sz):
        self._forward("scale", sx, sy, sz)

    def look_at(self, ex, ey, ez, lx, ly, lz, ux, uy, uz):
        self._forward("look_at", ex, ey, ez, lx, ly, lz, ux, uy, uz)

    def concat_transform(self, values):
        self._forward("concat_transform", values)

    def transform(self, values):
        self._forward("transform", values)

    def coordinate_system(self, name):
        self._forward("coordinate_system", name)

    def coord_sys_transform(self, name):
        self._forward("coord_sys_transform", name)

    def active_transform_all(self):
        self._forward("active_transform_all")

    def active_transform_end_time(self):
        self._forward("active_transform_end_time")

    def active_transform_start_time(self):
        self._forward("active_transform_start_time")

    def transform_times(self, start, end):
        self._forward("transform_times", start, end)

    def pixel_filter(self, name, params):
        self._forward("pixel_filter", name, params)

    def film(self, name, params):
        self._forward("film", name, params)

    def sampler(self, name, params):
        self._forward("sampler", name, params)

    def accelerator(self, name, params):
        self._forward("accelerator", name, params)

    def integrator(self, name, params):
        self._forward("integrator", name, params)

    def camera(self, name, params):
        self._forward("camera", name, params)

    def make_named_medium(self, name, params):
        self._forward("make_named_medium", name, params)

    def medium_interface(self, inside_name, outside_name):
        self._forward("medium_interface", inside_name, outside_name)

    def world_begin(self):
        self._forward("world_begin")

    def attribute_begin(self):
        self._forward("attribute_begin")

    def attribute_end(self):
        self._forward("attribute_end")

    def transform_begin(self):
        self._forward("transform_begin")

    def transform_end(self):
        self._forward("transform_end")

    def texture(self, name, color_type, tex_type, params):
        self._forward("texture", name, color_type, tex_type, params)

    def material(self, name, params):
        self._forward("material", name, params)

    def make_named_material(self, name, params):
        self._forward("make_named_material", name, params)

    def named_material(self, name):
        self._forward("named_material", name)

    def light_source(self, name, params):
        self._forward("light_source", name, params)

    def area_light_source(self, name, params):
        self._forward("area_light_source", name, params)

    def shape(self, name, params):
        self._forward("shape", name, params)

    def reverse_orientation(self):
        self._forward("reverse_orientation")

    def object_begin(self, name):
        self._forward("object_begin", name)

    def object_end(self):
        self._forward("object_end")

    def object_instance(self, name):
        self._forward("object_instance", name)

    def world_end(self):
        self._forward("world_end")

    def parse_file(self, filename):
        self._forward("parse_file", filename)

    def parse_string(self, text):
        self._forward("parse_string", text)

    def work_dir_begin(self, path):
        self._forward("work_dir_begin", path)

    def work_dir_end(self):
        self._forward("work_dir_end")

    def include(self, filename, params):
        self._forward("include", filename, params)
