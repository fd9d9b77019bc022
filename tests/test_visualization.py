import numpy as np
import pygame
import pytest

from conftest import FakeRasterizer
from credit_link import CreditLink, FieldState
from earth import EarthSphere
from text_sampler import TextSampler
from timers import TimerQueue
from visualization import Visualizer


@pytest.fixture
def visualizer():
    vis = Visualizer(window_size=(400, 300))
    yield vis
    vis.close()


@pytest.fixture
def credit(visualizer):
    link = CreditLink(
        TextSampler(FakeRasterizer(width=100)),
        TimerQueue(),
        text="Credit",
        navigate=lambda url: None,
        clock=lambda: 0,
        rng=np.random.default_rng(0),
        font_size=20,
    ).initialize(visualizer.size)
    earth = EarthSphere(grid_n=9, rng=np.random.default_rng(0))
    earth.resize(visualizer.size)
    visualizer.attach(link, earth)
    return link


def mouse_motion(pos):
    return pygame.event.Event(pygame.MOUSEMOTION, pos=pos, rel=(0, 0), buttons=(0, 0, 0), touch=False)


def test_quit_and_escape_stop_the_loop(visualizer):
    assert visualizer.handle_event(pygame.event.Event(pygame.QUIT)) is False
    escape = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE, mod=0, unicode="", scancode=0)
    assert visualizer.handle_event(escape) is False


def test_mouse_motion_moves_pointer(visualizer, credit):
    assert visualizer.handle_event(mouse_motion((40, 50))) is True
    assert credit.pointer == (40, 50)
    assert visualizer.pointer == (40.0, 50.0)


def test_touch_synthesized_mouse_events_are_ignored(visualizer, credit):
    event = pygame.event.Event(pygame.MOUSEMOTION, pos=(1, 2), rel=(0, 0), buttons=(0, 0, 0), touch=True)
    visualizer.handle_event(event)
    assert credit.pointer is None


def test_finger_motion_uses_normalized_coordinates(visualizer, credit):
    event = pygame.event.Event(pygame.FINGERMOTION, x=0.5, y=0.25, dx=0.0, dy=0.0, touch_id=0, finger_id=0)
    visualizer.handle_event(event)
    assert credit.pointer == (200.0, 75.0)


def test_left_click_on_text_explodes(visualizer, credit):
    # Text box: x in [280, 380], y in [256, 280]
    click = pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(300, 275), button=1, touch=False)
    visualizer.handle_event(click)
    assert credit.state is FieldState.EXPLODING


def test_right_click_does_not_explode(visualizer, credit):
    click = pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(300, 275), button=3, touch=False)
    visualizer.handle_event(click)
    assert credit.state is FieldState.IDLE


def test_finger_up_on_text_explodes(visualizer, credit):
    tap = pygame.event.Event(pygame.FINGERUP, x=300 / 400, y=275 / 300, dx=0.0, dy=0.0, touch_id=0, finger_id=0)
    visualizer.handle_event(tap)
    assert credit.exploding


def test_resize_rebuilds_field(visualizer, credit):
    old = credit.particles
    visualizer.handle_event(pygame.event.Event(pygame.VIDEORESIZE, size=(600, 500), w=600, h=500))
    assert credit.canvas_size == (600, 500)
    assert credit.particles is not old
    assert visualizer.credit_layer.get_size() == (600, 500)
    assert visualizer.earth.side == pytest.approx(475.0)


def test_draw_renders_a_frame(visualizer, credit):
    assert visualizer.draw(now=16) is True


class BrokenEarth:
    def step(self, pointer):
        pass

    def draw(self, target):
        raise RuntimeError("shading failed")

    def resize(self, size):
        pass


class BrokenCredit:
    def set_display_rect(self, rect):
        pass

    def tick(self, surface, now):
        raise RuntimeError("tick failed")


def test_failing_earth_is_detached_and_credit_still_renders(visualizer, credit):
    visualizer.earth = BrokenEarth()
    assert visualizer.draw(now=16) is True
    assert visualizer.earth is None
    assert visualizer.credit is credit

    x, y = credit.particles.positions[0]
    pixel = (int(round(x)), int(round(y)))
    assert visualizer.credit_layer.get_at(pixel).a == 255
    assert visualizer.screen.get_at(pixel)[:3] == (255, 255, 255)

    assert visualizer.draw(now=32) is True


def test_failing_credit_is_detached_and_earth_still_renders(visualizer, credit):
    earth = visualizer.earth
    visualizer.credit = BrokenCredit()
    visualizer.pointer = (earth.rect.centerx, earth.rect.top)
    assert visualizer.draw(now=16) is True
    assert visualizer.credit is None
    assert visualizer.earth is earth
    assert earth.exponent == pytest.approx(5.0)
