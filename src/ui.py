import math
import numpy as np
import pygame
from config import (
    DISPLAY_RANGE_CENTS,
    COLOR_BG, COLOR_SURF, COLOR_ACCENT, COLOR_ACCENT2, COLOR_TEXT,
    COLOR_SUBTLE, COLOR_WARN, COLOR_RED
)


def format_frequency(result) -> str:
    if result is None or not result.has_pitch:
        return "Detected: --- Hz"
    return f"Detected: {result.frequency_hz:.2f} Hz"


def format_cents(result) -> str:
    if result is None or not math.isfinite(result.cents):
        return "Cents: ---"
    return f"Cents: {result.cents:+.1f}"


class UIRenderer:

    def __init__(self, screen, size):
        self.screen = screen
        self.size = size

        self.font14 = pygame.font.SysFont(None, 14)
        self.font16 = pygame.font.SysFont(None, 16, bold=True)
        self.font20 = pygame.font.SysFont(None, 20, bold=True)
        self.font28 = pygame.font.SysFont(None, 28, bold=True)
        self.font96 = pygame.font.SysFont(None, 96, bold=True)

        self._toggle_btn_rect = None
        self._exit_btn_rect = None

    def blit_center(self, text, font, color, rect):
        surf = font.render(text, True, color)
        x = rect.x + (rect.w - surf.get_width()) // 2
        y = rect.y + (rect.h - surf.get_height()) // 2
        self.screen.blit(surf, (x, y))

    def draw_card(self, y, title, h):
        rect = pygame.Rect(12, y, self.size[0] - 24, h)
        pygame.draw.rect(self.screen, COLOR_SURF, rect, border_radius=16)
        self.screen.blit(self.font14.render(title, True, COLOR_TEXT), (rect.x + 16, rect.y + 10))
        pygame.draw.line(self.screen, (27, 39, 64),
                         (rect.x + 12, rect.y + 34), (rect.right - 12, rect.y + 34), 1)
        return rect

    def draw_appbar(self, capturing, target_hz):
        bar_h = 56
        pygame.draw.rect(self.screen, COLOR_SURF, (0, 0, self.size[0], bar_h))

        toggle = pygame.Rect(12, 8, 140, bar_h - 16)
        pygame.draw.rect(self.screen, COLOR_RED if capturing else COLOR_ACCENT, toggle, border_radius=10)
        self.blit_center("Stop" if capturing else "Start", self.font16, COLOR_TEXT, toggle)
        self._toggle_btn_rect = toggle

        target = self.font20.render(f"Target: {target_hz:.1f} Hz", True, COLOR_TEXT)
        self.screen.blit(target, (toggle.right + 24, (bar_h - target.get_height()) // 2))

        exit_rect = pygame.Rect(self.size[0] - 108, 8, 100, bar_h - 16)
        pygame.draw.rect(self.screen, (120, 40, 40), exit_rect, border_radius=10)
        self.blit_center("Quit", self.font16, COLOR_TEXT, exit_rect)
        self._exit_btn_rect = exit_rect

    def draw_needle_gauge(self, rect, cents):
        pygame.draw.rect(self.screen, (15, 22, 36), rect, border_radius=16)

        cx = rect.x + rect.w // 2
        cy = rect.y + rect.h - 10
        radius = max(60, min(rect.w // 2 - 20, rect.h - 30))
        arc_box = (cx - radius, cy - radius, 2 * radius, 2 * radius)
        span = [-DISPLAY_RANGE_CENTS, DISPLAY_RANGE_CENTS]
        angles = [math.radians(210), math.radians(330)]

        pygame.draw.arc(self.screen, (36, 53, 88), arc_box, angles[0], angles[1], 4)

        for val in range(-100, 101, 25):
            ang = np.interp(val, span, angles)
            inner = (cx + int((radius - 10) * math.cos(ang)), cy + int((radius - 10) * math.sin(ang)))
            outer = (cx + int(radius * math.cos(ang)), cy + int(radius * math.sin(ang)))
            pygame.draw.line(self.screen, (60, 80, 120), inner, outer, 2)
            lbl = self.font14.render(f"{val:+d}" if val else "0", True, COLOR_SUBTLE)
            tx = cx + int((radius + 16) * math.cos(ang))
            ty = cy + int((radius + 16) * math.sin(ang))
            self.screen.blit(lbl, (tx - lbl.get_width() // 2, ty - lbl.get_height() // 2))

        # in-tune band, +/- 5 cents
        pygame.draw.arc(self.screen, COLOR_ACCENT2, arc_box,
                        np.interp(-5, span, angles), np.interp(5, span, angles), 10)

        ang = np.interp(cents, span, angles)
        tip = (cx + int((radius - 18) * math.cos(ang)), cy + int((radius - 18) * math.sin(ang)))
        color = COLOR_ACCENT if abs(cents) <= 5 else COLOR_WARN
        pygame.draw.line(self.screen, color, (cx, cy), tip, 5)
        pygame.draw.circle(self.screen, (220, 220, 220), (cx, cy), 8)

    def render(self, result, capturing, target_hz, status=None):
        self.screen.fill(COLOR_BG)
        self.draw_appbar(capturing, target_hz)

        card = self.draw_card(64, "Note", 150)
        label = result.label if result is not None else "---"
        self.blit_center(label, self.font96, COLOR_TEXT, pygame.Rect(card.x, card.y + 30, card.w, 74))
        self.blit_center(format_frequency(result), self.font28, COLOR_SUBTLE,
                         pygame.Rect(card.x, card.y + 104, card.w, 32))

        card2 = self.draw_card(card.bottom + 8, format_cents(result),
                               self.size[1] - (card.bottom + 8) - 40)
        inner = pygame.Rect(card2.x + 16, card2.y + 40, card2.w - 32, card2.h - 52)
        self.draw_needle_gauge(inner, result.display_cents if result is not None else 0.0)

        if status:
            msg = self.font16.render(status, True, COLOR_WARN)
            self.screen.blit(msg, (16, self.size[1] - 28))

        pygame.display.flip()

    @property
    def toggle_btn_rect(self):
        return self._toggle_btn_rect

    @property
    def exit_btn_rect(self):
        return self._exit_btn_rect
