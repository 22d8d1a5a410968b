"""
Абстрактный интерфейс потребителя директив: один метод на директиву
плюс служебные cleanup / parse_file / parse_string.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Sequence

from pbrtscene.scene.properties import PropertyMap


class ParseTarget(ABC):
    """Base interface for directive consumers."""

    @abstractmethod
    def cleanup(self) -> None:
        pass

    # ----------------- преобразования -----------------
    @abstractmethod
    def identity(self) -> None:
        pass

    @abstractmethod
    def translate(self, dx: float, dy: float, dz: float) -> None:
        pass

    @abstractmethod
    def rotate(self, angle: float, ax: float, ay: float, az: float) -> None:
        pass

    @abstractmethod
    def scale(self, sx: float, sy: float, sz: float) -> None:
        pass

    @abstractmethod
    def look_at(self, ex: float, ey: float, ez: float,
                lx: float, ly: float, lz: float,
                ux: float, uy: float, uz: float) -> None:
        pass

    @abstractmethod
    def concat_transform(self, values: Sequence[float]) -> None:
        pass

    @abstractmethod
    def transform(self, values: Sequence[float]) -> None:
        pass

    @abstractmethod
    def coordinate_system(self, name: str) -> None:
        pass

    @abstractmethod
    def coord_sys_transform(self, name: str) -> None:
        pass

    @abstractmethod
    def active_transform_all(self) -> None:
        pass

    @abstractmethod
    def active_transform_end_time(self) -> None:
        pass

    @abstractmethod
    def active_transform_start_time(self) -> None:
        pass

    @abstractmethod
    def transform_times(self, start: float, end: float) -> None:
        pass

    # ----------------- опции рендера -----------------
    @abstractmethod
    def pixel_filter(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def film(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def sampler(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def accelerator(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def integrator(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def camera(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def make_named_medium(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def medium_interface(self, inside_name: str, outside_name: str) -> None:
        pass

    # ----------------- мир -----------------
    @abstractmethod
    def world_begin(self) -> None:
        pass

    @abstractmethod
    def attribute_begin(self) -> None:
        pass

    @abstractmethod
    def attribute_end(self) -> None:
        pass

    @abstractmethod
    def transform_begin(self) -> None:
        pass

    @abstractmethod
    def transform_end(self) -> None:
        pass

    @abstractmethod
    def texture(self, name: str, color_type: str, tex_type: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def material(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def make_named_material(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def named_material(self, name: str) -> None:
        pass

    @abstractmethod
    def light_source(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def area_light_source(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def shape(self, name: str, params: PropertyMap) -> None:
        pass

    @abstractmethod
    def reverse_orientation(self) -> None:
        pass

    @abstractmethod
    def object_begin(self, name: str) -> None:
        pass

    @abstractmethod
    def object_end(self) -> None:
        pass

    @abstractmethod
    def object_instance(self, name: str) -> None:
        pass

    @abstractmethod
    def world_end(self) -> None:
        pass

    # ----------------- файлы -----------------
    @abstractmethod
    def parse_file(self, filename: str) -> None:
        pass

    @abstractmethod
    def parse_string(self, text: str) -> None:
        pass

    @abstractmethod
    def work_dir_begin(self, path: str) -> None:
        pass

    @abstractmethod
    def work_dir_end(self) -> None:
        pass

    @abstractmethod
    def include(self, filename: str, params: PropertyMap) -> None:
        pass
