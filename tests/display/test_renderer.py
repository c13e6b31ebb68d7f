# tests/display/test_renderer.py
from retro_arcade.display.renderer import (
    RecordingRenderer, physical_points, to_physical, intensity_to_alpha,
)

def test_to_physical_flips_y():
    assert to_physical(0, 0, 800, 600) == (0, 600)
    assert to_physical(512, 512, 800, 600) == (400, 300)
    assert to_physical(1024, 1024, 1024, 1024) == (1024, 0)

def test_intensity_to_alpha():
    assert intensity_to_alpha(0) == 0
    assert intensity_to_alpha(1) == 17
    assert intensity_to_alpha(15) == 255

def test_recording_renderer_frames():
    renderer = RecordingRenderer(640, 480)
    assert renderer.output_size() == (640, 480)
    renderer.begin_frame()
    renderer.draw_segment(0, 0, 10, 10, 3)
    renderer.draw_point(5, 5, 15)
    renderer.present_frame()
    renderer.begin_frame()
    renderer.present_frame()

    assert renderer.frame_count == 2
    assert renderer.frames[0] == [("segment", 0, 0, 10, 10, 3), ("point", 5, 5, 15)]
    assert renderer.frames[1] == []

def test_physical_points_use_renderer_output_size():
    renderer = RecordingRenderer(800, 600)
    assert physical_points(renderer, ("segment", 0, 0, 512, 512, 7)) == [(0, 600), (400, 300)]
    assert physical_points(renderer, ("point", 1024, 1024, 15)) == [(800, 0)]
