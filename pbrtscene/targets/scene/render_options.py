"""Опции рендера, накопленные до WorldBegin."""

from pbrtscene.scene.properties import PropertyMap


class RenderOptions:

    def __init__(self):
        self.transform_start_time = 0.0
        self.transform_end_time = 1.0
        self.filter_name = "box"
        self.filter_params = PropertyMap()
        self.film_name = "image"
        self.film_params = PropertyMap()
        self.sampler_name = "halton"
        self.sampler_params = PropertyMap()
        self.accelerator_name = "bvh"
        self.accelerator_params = PropertyMap()
        self.integrator_name = "path"
        self.integrator_params = PropertyMap()
        self.camera_name = "perspective"
        self.camera_params = PropertyMap()
