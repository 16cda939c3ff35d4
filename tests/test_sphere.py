"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Range limits on t
- Python-side Sphere construction and intersects()
"""

import math

import pytest
import taichi as ti


class TestHitSphere:
    """Tests for the device-side hit_sphere function."""

    def test_hit_sphere_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        from spheretrace.core.vector import vec3
        from spheretrace.geometry.sphere import SphereGeometry, hit_sphere

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f64, shape=())
        point = ti.Vector.field(3, dtype=ti.f64, shape=())
        normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = SphereGeometry(center=vec3(0.0, 0.0, -1.0), radius=0.5)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1e10)
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 0.5) < 1e-12
        p = point[None]
        assert abs(p[0]) < 1e-12
        assert abs(p[1]) < 1e-12
        assert abs(p[2] - (-0.5)) < 1e-12
        n = normal[None]
        assert abs(n[2] - 1.0) < 1e-12
        assert front_face[None] == 1

    def test_hit_sphere_miss(self):
        """Test ray passing beside the sphere."""
        from spheretrace.core.vector import vec3
        from spheretrace.geometry.sphere import SphereGeometry, hit_sphere

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = SphereGeometry(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(5.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1e10)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_inside(self):
        """Test ray starting inside sphere gets a normal facing it."""
        from spheretrace.core.vector import dot, vec3
        from spheretrace.geometry.sphere import SphereGeometry, hit_sphere

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f64, shape=())
        facing = ti.field(dtype=ti.f64, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            direction = vec3(0.0, 0.0, 1.0)
            sphere = SphereGeometry(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), direction, sphere, 0.001, 1e10)
            hit[None] = record.hit
            t_val[None] = record.t
            facing[None] = dot(record.normal, direction)
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 1.0) < 1e-12
        assert facing[None] < 0.0
        assert front_face[None] == 0

    def test_hit_sphere_behind_ray(self):
        """Test a sphere entirely behind the ray origin is missed."""
        from spheretrace.core.vector import vec3
        from spheretrace.geometry.sphere import SphereGeometry, hit_sphere

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = SphereGeometry(center=vec3(0.0, 0.0, 5.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1e10)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_t_max_excludes_far_hits(self):
        """Test roots beyond t_max are rejected."""
        from spheretrace.core.vector import vec3
        from spheretrace.geometry.sphere import SphereGeometry, hit_sphere

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = SphereGeometry(center=vec3(0.0, 0.0, -10.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 5.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_root_equal_to_t_max_is_rejected(self):
        """Test the upper bound is exclusive: a root exactly at t_max misses."""
        from spheretrace.core.vector import vec3
        from spheretrace.geometry.sphere import SphereGeometry, hit_sphere

        hit = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            sphere = SphereGeometry(center=vec3(0.0, 0.0, -3.0), radius=1.0)
            hit[0] = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 2.0).hit
            hit[1] = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 2.5).hit

        test_kernel()
        assert hit[0] == 0
        assert hit[1] == 1

    def test_t_min_selects_far_root(self):
        """Test the far root is used when the near root is below t_min."""
        from spheretrace.core.vector import vec3
        from spheretrace.geometry.sphere import SphereGeometry, hit_sphere

        t_val = ti.field(dtype=ti.f64, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = SphereGeometry(center=vec3(0.0, 0.0, -3.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 2.5, 1e10)
            t_val[None] = record.t
            front_face[None] = record.front_face

        test_kernel()
        assert abs(t_val[None] - 4.0) < 1e-12
        assert front_face[None] == 0


class TestSphereObject:
    """Tests for the Python-side Sphere."""

    def test_construction(self):
        """Test a sphere stores center, radius and material."""
        from spheretrace.geometry import Sphere
        from spheretrace.materials import Matte

        material = Matte((0.5, 0.5, 0.5))
        sphere = Sphere((1, 2, 3), 2, material)
        assert sphere.center == (1.0, 2.0, 3.0)
        assert sphere.radius == 2.0
        assert sphere.material is material

    @pytest.mark.parametrize("radius", [0.0, -0.5])
    def test_rejects_non_positive_radius(self, radius):
        """Test radius <= 0 raises ValueError at construction."""
        from spheretrace.geometry import Sphere
        from spheretrace.materials import Matte

        with pytest.raises(ValueError, match="radius"):
            Sphere((0.0, 0.0, 0.0), radius, Matte((0.5, 0.5, 0.5)))

    def test_rejects_non_material(self):
        """Test a sphere needs a Material."""
        from spheretrace.geometry import Sphere

        with pytest.raises(TypeError):
            Sphere((0.0, 0.0, 0.0), 1.0, (0.5, 0.5, 0.5))  # type: ignore[arg-type]

    def test_intersects_unit_example(self):
        """Test the canonical hit: t=0.5, point (0,0,-0.5), normal (0,0,1)."""
        from spheretrace.geometry import Sphere
        from spheretrace.materials import Matte

        sphere = Sphere((0.0, 0.0, -1.0), 0.5, Matte((0.8, 0.8, 0.8)))
        hit = sphere.intersects((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 0.001, math.inf)

        assert hit is not None
        assert hit.t == pytest.approx(0.5, abs=1e-12)
        assert hit.point == pytest.approx((0.0, 0.0, -0.5), abs=1e-12)
        assert hit.normal == pytest.approx((0.0, 0.0, 1.0), abs=1e-12)
        assert hit.front_face is True

    def test_intersects_normalizes_direction(self):
        """Test t is a distance even for a non-unit direction."""
        from spheretrace.geometry import Sphere
        from spheretrace.materials import Matte

        sphere = Sphere((0.0, 0.0, -1.0), 0.5, Matte((0.8, 0.8, 0.8)))
        hit = sphere.intersects((0.0, 0.0, 0.0), (0.0, 0.0, -4.0), 0.001, math.inf)
        assert hit is not None
        assert hit.t == pytest.approx(0.5, abs=1e-12)

    def test_intersects_miss_returns_none(self):
        """Test a miss returns None."""
        from spheretrace.geometry import Sphere
        from spheretrace.materials import Matte

        sphere = Sphere((0.0, 0.0, -1.0), 0.5, Matte((0.8, 0.8, 0.8)))
        assert sphere.intersects((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), 0.001, math.inf) is None

    def test_intersects_from_inside_faces_ray(self):
        """Test the normal opposes the ray when starting inside."""
        from spheretrace.geometry import Sphere
        from spheretrace.materials import Matte

        sphere = Sphere((0.0, 0.0, 0.0), 2.0, Matte((0.8, 0.8, 0.8)))
        direction = (0.6, 0.0, 0.8)
        hit = sphere.intersects((0.0, 0.0, 0.0), direction, 0.001, math.inf)

        assert hit is not None
        assert hit.front_face is False
        assert sum(n * d for n, d in zip(hit.normal, direction)) < 0.0
        assert hit.t == pytest.approx(2.0, abs=1e-12)

    def test_intersects_rejects_zero_direction(self):
        """Test a zero direction raises ValueError."""
        from spheretrace.geometry import Sphere
        from spheretrace.materials import Matte

        sphere = Sphere((0.0, 0.0, -1.0), 0.5, Matte((0.8, 0.8, 0.8)))
        with pytest.raises(ValueError):
            sphere.intersects((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 0.001, math.inf)
