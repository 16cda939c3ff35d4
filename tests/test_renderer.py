"""Unit tests for the pixel sampler and renderer.

Tests cover:
- RenderConfig validation
- Image dimensions and output layout
- Value range and determinism
- Progress reporting
"""

import numpy as np
import pytest

TEST_WIDTH = 32


def _small_config(**overrides):
    from spheretrace.core.renderer import RenderConfig

    options = {"samples_per_pixel": 4, "max_depth": 8, "seed": 0, "rows_per_batch": 5}
    options.update(overrides)
    return RenderConfig(**options)


class TestRenderConfig:
    """Tests for RenderConfig."""

    def test_defaults(self):
        """Test the default sampling configuration."""
        from spheretrace.core.renderer import RenderConfig

        config = RenderConfig()
        assert config.max_depth == 50
        assert config.samples_per_pixel == 50
        assert config.seed == 0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"max_depth": -1},
            {"samples_per_pixel": 0},
            {"seed": -1},
            {"seed": 2**32},
            {"rows_per_batch": 0},
        ],
    )
    def test_invalid_values(self, overrides):
        """Test out-of-range settings raise ValueError."""
        from spheretrace.core.renderer import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(**overrides)


class TestImageSize:
    """Tests for Renderer.image_size."""

    def test_height_from_aspect_ratio(self):
        """Test height is int(width / aspect_ratio)."""
        from spheretrace.camera import Camera
        from spheretrace.core.renderer import Renderer
        from spheretrace.scene import Scene

        renderer = Renderer(Scene(), Camera())
        assert renderer.image_size(400) == (400, 225)

    @pytest.mark.parametrize("width", [0, -3, 1])
    def test_empty_image_rejected(self, width):
        """Test a width below 1 or a derived height below 1 raises ValueError."""
        from spheretrace.camera import Camera
        from spheretrace.core.renderer import Renderer
        from spheretrace.scene import Scene

        with pytest.raises(ValueError):
            Renderer(Scene(), Camera()).image_size(width)


class TestRender:
    """Tests for render() output."""

    def test_output_layout_and_range(self):
        """Test width * height colors, all channels within [0, 1]."""
        from spheretrace.core.renderer import render
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        pixels = render(scene, camera, TEST_WIDTH, _small_config())

        height = camera.image_height(TEST_WIDTH)
        assert pixels.shape == (TEST_WIDTH * height, 3)
        assert pixels.dtype == np.float64
        assert np.all(pixels >= 0.0)
        assert np.all(pixels <= 1.0)

    def test_render_image_matches_flat_render(self):
        """Test the flat output is the row-major flattening of the image."""
        from spheretrace.core.renderer import Renderer
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        renderer = Renderer(scene, camera, _small_config())
        image = renderer.render_image(TEST_WIDTH)
        flat = renderer.render(TEST_WIDTH)

        assert image.shape == (camera.image_height(TEST_WIDTH), TEST_WIDTH, 3)
        np.testing.assert_array_equal(image.reshape(-1, 3), flat)

    def test_same_seed_is_deterministic(self):
        """Test two renders with the same seed are identical."""
        from spheretrace.core.renderer import render
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        first = render(scene, camera, TEST_WIDTH, _small_config(seed=11))
        second = render(scene, camera, TEST_WIDTH, _small_config(seed=11))
        np.testing.assert_array_equal(first, second)

    def test_batch_size_does_not_change_image(self):
        """Test the row batching has no effect on pixel values."""
        from spheretrace.core.renderer import render
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        first = render(scene, camera, TEST_WIDTH, _small_config(rows_per_batch=1))
        second = render(scene, camera, TEST_WIDTH, _small_config(rows_per_batch=64))
        np.testing.assert_array_equal(first, second)

    def test_different_seed_changes_noise(self):
        """Test another seed produces a different noise pattern."""
        from spheretrace.core.renderer import render
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        first = render(scene, camera, TEST_WIDTH, _small_config(seed=1))
        second = render(scene, camera, TEST_WIDTH, _small_config(seed=2))
        assert not np.array_equal(first, second)

    def test_depth_zero_renders_black(self):
        """Test max_depth 0 gives an all-black image."""
        from spheretrace.core.renderer import render
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        pixels = render(scene, camera, TEST_WIDTH, _small_config(max_depth=0))
        assert np.all(pixels == 0.0)

    def test_empty_scene_shows_sky_gradient(self):
        """Test an empty scene renders the sky: bluer at the top, whiter at the bottom."""
        from spheretrace.camera import Camera
        from spheretrace.scene import Scene

        camera = Camera()
        image = (
            Scene()
            .render(camera, TEST_WIDTH, _small_config())
            .reshape(camera.image_height(TEST_WIDTH), TEST_WIDTH, 3)
        )

        np.testing.assert_allclose(image[..., 2], 1.0, atol=1e-12)
        row_red = image[..., 0].mean(axis=1)
        assert np.all(np.diff(row_red) > 0.0)
        assert np.all(image[..., 0] >= 0.5)

    def test_progress_callback(self):
        """Test the callback reports every batch and ends at the full height."""
        from spheretrace.core.renderer import render
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        height = camera.image_height(TEST_WIDTH)
        calls = []

        render(
            scene,
            camera,
            TEST_WIDTH,
            _small_config(rows_per_batch=5),
            callback=lambda done, total: calls.append((done, total)),
        )

        assert calls[-1] == (height, height)
        assert all(total == height for _, total in calls)
        assert [done for done, _ in calls] == sorted(done for done, _ in calls)
        assert len(calls) == -(-height // 5)

    def test_scene_is_unchanged_by_render(self):
        """Test rendering leaves the sphere list untouched."""
        from spheretrace.core.renderer import render
        from spheretrace.scene import create_default_scene

        scene, camera = create_default_scene()
        before = scene.spheres
        render(scene, camera, TEST_WIDTH, _small_config())
        assert scene.spheres == before
