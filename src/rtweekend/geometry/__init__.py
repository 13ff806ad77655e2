"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, hit records and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) so they run inside
parallel render kernels. A query returns a HitRecord whose ``hit`` flag tells
whether the ray struck the surface within the requested interval.
"""

from .sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    make_miss_record,
    make_sphere,
    set_face_normal,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss_record",
    "set_face_normal",
]
