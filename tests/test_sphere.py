"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Interval bounds are exclusive
- Zero and negative radii
"""

import taichi as ti


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere_clamps_negative_radius(self):
        """Test make_sphere clamps a negative radius to zero."""
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import make_sphere

        radius_result = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            radius_result[0] = make_sphere(vec3(0.0, 0.0, 0.0), -1.0, 0).radius
            radius_result[1] = make_sphere(vec3(0.0, 0.0, 0.0), 0.5, 0).radius

        test_kernel()
        assert radius_result[0] == 0.0
        assert radius_result[1] == 0.5


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_sphere_direct_hit(self):
        """Test ray from the origin toward a sphere at z=-1."""
        from rtweekend.core.interval import make_interval
        from rtweekend.core.ray import make_ray
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import hit_sphere, make_sphere

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f64, shape=())
        point = ti.Vector.field(3, dtype=ti.f64, shape=())
        normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            sphere = make_sphere(vec3(0.0, 0.0, -1.0), 0.5, 7)
            record = hit_sphere(ray, sphere, make_interval(0.001, 1e30))
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.p
            normal[None] = record.normal
            front_face[None] = record.front_face
            material_id[None] = record.material_id

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 0.5) < 1e-12
        p = point[None]
        assert abs(p[2] + 0.5) < 1e-12
        n = normal[None]
        assert abs(n[0]) < 1e-12
        assert abs(n[1]) < 1e-12
        assert abs(n[2] - 1.0) < 1e-12
        assert front_face[None] == 1
        assert material_id[None] == 7

    def test_hit_sphere_miss(self):
        """Test ray missing sphere entirely."""
        from rtweekend.core.interval import make_interval
        from rtweekend.core.ray import make_ray
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import hit_sphere, make_sphere

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))
            sphere = make_sphere(vec3(0.0, 0.0, -1.0), 0.5, 0)
            hit[None] = hit_sphere(ray, sphere, make_interval(0.001, 1e30)).hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_inside(self):
        """Test ray starting inside sphere hits the back face."""
        from rtweekend.core.interval import make_interval
        from rtweekend.core.ray import make_ray
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import hit_sphere, make_sphere

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f64, shape=())
        normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
            sphere = make_sphere(vec3(0.0, 0.0, 0.0), 1.0, 0)
            record = hit_sphere(ray, sphere, make_interval(0.001, 1e30))
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 1.0) < 1e-12
        assert front_face[None] == 0
        # Normal faces back against the ray
        n = normal[None]
        assert abs(n[2] + 1.0) < 1e-12

    def test_hit_sphere_far_root_when_near_root_excluded(self):
        """Test the far root is used when the near root is outside the interval."""
        from rtweekend.core.interval import make_interval
        from rtweekend.core.ray import make_ray
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import hit_sphere, make_sphere

        t_val = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            sphere = make_sphere(vec3(0.0, 0.0, -1.0), 0.5, 0)
            t_val[None] = hit_sphere(ray, sphere, make_interval(0.6, 1e30)).t

        test_kernel()
        assert abs(t_val[None] - 1.5) < 1e-12

    def test_hit_sphere_interval_bounds_exclusive(self):
        """Test roots exactly on the interval bounds are rejected."""
        from rtweekend.core.interval import make_interval
        from rtweekend.core.ray import make_ray
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import hit_sphere, make_sphere

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            sphere = make_sphere(vec3(0.0, 0.0, -1.0), 0.5, 0)
            # Roots are 0.5 and 1.5
            hit[None] = hit_sphere(ray, sphere, make_interval(0.5, 1.5)).hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_zero_radius_never_hits(self):
        """Test a zero-radius sphere is never hit, even dead-center."""
        from rtweekend.core.interval import make_interval
        from rtweekend.core.ray import make_ray
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import hit_sphere, make_sphere

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            sphere = make_sphere(vec3(0.0, 0.0, -1.0), -2.0, 0)
            hit[None] = hit_sphere(ray, sphere, make_interval(0.001, 1e30)).hit

        test_kernel()
        assert hit[None] == 0


class TestSetFaceNormal:
    """Tests for normal orientation."""

    def test_front_face_when_ray_opposes_normal(self):
        """Test a ray against the outward normal keeps it and reports front face."""
        from rtweekend.core.vec3 import vec3
        from rtweekend.geometry.sphere import set_face_normal

        face = ti.field(dtype=ti.i32, shape=2)
        normals = ti.Vector.field(3, dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            f0, n0 = set_face_normal(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
            f1, n1 = set_face_normal(vec3(0.0, 1.0, 0.0), vec3(0.0, 1.0, 0.0))
            face[0] = f0
            face[1] = f1
            normals[0] = n0
            normals[1] = n1

        test_kernel()
        assert face[0] == 1
        assert normals[0][1] == 1.0
        assert face[1] == 0
        assert normals[1][1] == -1.0
