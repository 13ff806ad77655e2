"""Vector math and random sampling utilities.

This module defines the 3D vector type shared by points, directions and
colors, together with the vector operations and Monte Carlo sampling helpers
the tracer is built on. Everything here is a Taichi function (@ti.func) and is
meant to be called from inside kernels.

Vectors are double precision. Initialize Taichi through
``rtweekend.runtime.init()`` so that float literals inside kernels are
float64 as well.

Example:
    >>> from rtweekend import runtime
    >>> runtime.init(arch="cpu", seed=7)
    >>> from rtweekend.core.vec3 import vec3, reflect
    >>> # Use within a Taichi kernel:
    >>> # r = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

# Double precision 3-vector used for points, directions and colors
vec3 = ti.types.vector(3, ti.f64)

# Threshold below which every component counts as zero
NEAR_ZERO_EPSILON = 1e-8


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return tm.sqrt(tm.dot(v, v))


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The caller must guarantee a non-zero vector. A zero-length input yields
    non-finite components.
    """
    return v / length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check whether every component is within NEAR_ZERO_EPSILON of zero.

    Args:
        v: The vector to check.

    Returns:
        1 if all components are near zero, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror a vector about a normal.

    Computes v - 2 * dot(v, n) * n. The normal should be unit length.

    Args:
        v: The incoming direction (pointing toward the surface).
        n: The surface normal.

    Returns:
        The reflected direction.
    """
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: ti.f64) -> vec3:
    """Bend a unit direction through a surface using Snell's law.

    The refracted ray is split into the part perpendicular to the normal and
    the part parallel to it. Total internal reflection is not detected here;
    callers check for it before refracting.

    Args:
        uv: The incoming direction (unit length).
        n: The surface normal facing the incoming ray (unit length).
        etai_over_etat: Ratio of the refractive indices (incident over
            transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = tm.min(tm.dot(-uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -tm.sqrt(ti.abs(1.0 - tm.dot(r_out_perp, r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def reflectance(cosine: ti.f64, refraction_index: ti.f64) -> ti.f64:
    """Schlick's approximation of Fresnel reflectance.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal.
        refraction_index: Ratio of refractive indices at the interface.

    Returns:
        The approximate fraction of light reflected.
    """
    r0 = (1.0 - refraction_index) / (1.0 + refraction_index)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_double() -> ti.f64:
    """Draw a uniform float in [0, 1)."""
    return ti.random(ti.f64)


@ti.func
def random_double_in_range(lo: ti.f64, hi: ti.f64) -> ti.f64:
    """Draw a uniform float in [lo, hi)."""
    return lo + (hi - lo) * ti.random(ti.f64)


@ti.func
def random_vec3() -> vec3:
    """Build a vector whose components are each uniform in [0, 1)."""
    return vec3(ti.random(ti.f64), ti.random(ti.f64), ti.random(ti.f64))


@ti.func
def random_vec3_in_range(lo: ti.f64, hi: ti.f64) -> vec3:
    """Build a vector whose components are each uniform in [lo, hi)."""
    return vec3(
        random_double_in_range(lo, hi),
        random_double_in_range(lo, hi),
        random_double_in_range(lo, hi),
    )


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point strictly inside the unit ball.

    Rejection samples the [-1, 1)^3 cube until a point lands inside the ball.
    The loop terminates with probability one; roughly half the draws are
    accepted.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    while found == 0:
        p = random_vec3_in_range(-1.0, 1.0)
        lensq = tm.dot(p, p)
        # Reject the near-origin region too, its normalization underflows
        if 1e-160 < lensq and lensq < 1.0:
            found = 1
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere."""
    return normalize(random_in_unit_sphere())


@ti.func
def random_on_hemisphere(normal: vec3) -> vec3:
    """Generate a random unit vector on the normal's side of the surface.

    Args:
        normal: The surface normal defining the hemisphere.

    Returns:
        A unit vector whose dot product with normal is positive.
    """
    on_unit_sphere = random_unit_vector()
    result = on_unit_sphere
    if tm.dot(on_unit_sphere, normal) <= 0.0:
        result = -on_unit_sphere
    return result


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point (x, y, 0) inside the unit disk.

    Used to jitter the ray origin across the camera lens for depth of field.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    while found == 0:
        p = vec3(
            random_double_in_range(-1.0, 1.0),
            random_double_in_range(-1.0, 1.0),
            0.0,
        )
        if p.x * p.x + p.y * p.y < 1.0:
            found = 1
    return p
