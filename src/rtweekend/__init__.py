"""A Taichi-based recursive, stochastic ray tracer.

Renders scenes of spheres with diffuse, metal and glass materials under a sky
gradient, with anti-aliasing and depth of field.

Taichi must be initialized before any module that declares fields is
imported, so start with ``rtweekend.runtime.init()``.

Subpackages:
    core: Vector math, rays, intervals, the path integrator and rendering loop
    geometry: Spheres and ray-sphere intersection
    materials: Lambertian, metal and dielectric scattering
    scene: Scene storage, scene manager and preset scenes
    camera: Camera configuration and primary ray generation
    preview: Gamma correction and PPM/PNG export
"""

__version__ = "0.1.0"
