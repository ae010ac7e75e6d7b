import pytest

from sdfrender.camera import (
    Rect,
    ThreeDCamera,
    ThreeDMode,
    TwoDCamera,
    TwoDMode,
    ViewMode,
    fit_uv,
)

RECT = Rect((0.0, 0.0), (100.0, 100.0))
FULL = Rect((0.0, 0.0), (1.0, 1.0))


def test_fit_uv_square_is_full():
    assert fit_uv(100, 100) == FULL


@pytest.mark.parametrize("width,height", [(200, 100), (100, 300), (640, 480)])
def test_fit_uv_preserves_aspect(width, height):
    uv = fit_uv(width, height)
    assert uv.min[0] + uv.max[0] == pytest.approx(1.0)
    assert uv.min[1] + uv.max[1] == pytest.approx(1.0)
    assert uv.width / uv.height == pytest.approx(width / height)
    assert max(uv.width, uv.height) == pytest.approx(1.0)


def test_mouse_to_uv_center_and_corner():
    cam = TwoDCamera()
    assert cam.mouse_to_uv(RECT, FULL, (50.0, 50.0)) == pytest.approx((0.0, 0.0))
    assert cam.mouse_to_uv(RECT, FULL, (0.0, 0.0)) == pytest.approx((-1.0, 1.0))


def test_mouse_to_uv_applies_offset():
    cam = TwoDCamera(offset=(0.25, -0.5))
    assert cam.mouse_to_uv(RECT, FULL, (50.0, 50.0)) == pytest.approx((0.25, -0.5))


def test_drag_keeps_point_under_cursor():
    cam = TwoDCamera()
    assert cam.drag(RECT, FULL, (20.0, 30.0)) is False
    start = cam.drag_start
    assert start == pytest.approx(cam.mouse_to_uv(RECT, FULL, (20.0, 30.0)))
    assert cam.drag(RECT, FULL, (70.0, 10.0)) is True
    assert cam.mouse_to_uv(RECT, FULL, (70.0, 10.0)) == pytest.approx(start)


def test_release_starts_new_drag():
    cam = TwoDCamera()
    cam.drag(RECT, FULL, (10.0, 10.0))
    cam.release()
    assert cam.drag_start is None
    assert cam.drag(RECT, FULL, (40.0, 40.0)) is False


def test_zoom_without_scroll_changes_nothing():
    cam = TwoDCamera()
    assert cam.zoom(RECT, FULL, 0.0, (10.0, 10.0)) is False
    assert cam.scale == 1.0
    assert cam.offset == (0.0, 0.0)


def test_zoom_keeps_point_under_mouse():
    cam = TwoDCamera()
    mouse = (80.0, 25.0)
    before = cam.mouse_to_uv(RECT, FULL, mouse)
    assert cam.zoom(RECT, FULL, 100.0, mouse) is True
    assert cam.scale == pytest.approx(0.5)
    assert cam.mouse_to_uv(RECT, FULL, mouse) == pytest.approx(before)


def test_zoom_without_mouse_keeps_offset():
    cam = TwoDCamera(offset=(0.1, 0.2))
    assert cam.zoom(RECT, FULL, -100.0, None) is True
    assert cam.scale == pytest.approx(2.0)
    assert cam.offset == (0.1, 0.2)


def test_three_d_camera_has_no_picking():
    with pytest.raises(RuntimeError):
        ThreeDCamera().mouse_to_uv(RECT, FULL, (0.0, 0.0))


def test_view_mode_default_is_2d_color():
    view = ViewMode()
    assert view.mode is TwoDMode.COLOR
    assert view.is_3d is False


def test_set_2d_mode_reports_change():
    view = ViewMode()
    assert view.set_2d_mode(TwoDMode.COLOR) is False
    assert view.set_2d_mode(TwoDMode.SDF) is True
    assert view.mode is TwoDMode.SDF


def test_switching_dimension_resets_camera():
    view = ViewMode(camera=TwoDCamera(scale=3.0), mode=TwoDMode.DEBUG)
    assert view.set_3d_mode(ThreeDMode.HEIGHTMAP) is True
    assert view.is_3d is True
    assert view.set_3d_mode(ThreeDMode.HEIGHTMAP) is False
    assert view.set_3d_mode(ThreeDMode.COLOR) is True
    assert view.set_2d_mode(TwoDMode.DEBUG) is True
    assert view.camera == TwoDCamera()


def test_view_mode_rejects_mismatch():
    with pytest.raises(ValueError):
        ViewMode(camera=ThreeDCamera(), mode=TwoDMode.COLOR)