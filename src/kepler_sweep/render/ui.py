from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from .assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0
    active_color: Color | None = None


class Button:
    """Rectangular button with hover feedback, a callback and optional live text.

    ``enabled_getter`` greys the button out and ignores clicks while it
    returns ``False``; ``active_getter`` switches to the active colour, used
    for toggles such as the sweep button.
    """

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        text_getter: Callable[[], str] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
        enabled_getter: Callable[[], bool] | None = None,
        active_getter: Callable[[], bool] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._text = text
        self._callback = callback
        self._text_getter = text_getter
        self._enabled_getter = enabled_getter
        self._active_getter = active_getter
        self._style = style

    def get_text(self) -> str:
        if self._text_getter is not None:
            return self._text_getter()
        return self._text

    @property
    def enabled(self) -> bool:
        return self._enabled_getter is None or self._enabled_getter()

    @property
    def active(self) -> bool:
        return self._active_getter is not None and self._active_getter()

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        effective_style = style or self._style
        if effective_style is None:
            raise ValueError("Button style must be provided")
        hovered = self.enabled and self.rect.collidepoint(mouse_pos)
        color = effective_style.hover_color if hovered else effective_style.base_color
        if self.active and effective_style.active_color is not None:
            color = effective_style.active_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(
            button_surface,
            color,
            button_surface.get_rect(),
            border_radius=effective_style.radius,
        )
        if effective_style.border_color is not None and effective_style.border_width > 0:
            pygame.draw.rect(
                button_surface,
                effective_style.border_color,
                button_surface.get_rect(),
                effective_style.border_width,
                border_radius=effective_style.radius,
            )
        if not self.enabled:
            button_surface.set_alpha(110)
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.get_text(), effective_style.text_color)
        if not self.enabled:
            text_surf = text_surf.copy()
            text_surf.set_alpha(110)
        text_rect = text_surf.get_rect(center=self.rect.center)
        surface.blit(text_surf, text_rect)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.enabled and self.rect.collidepoint(event.pos):
                self._callback()
                return True
        return False


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(
        panel_surface,
        background_color,
        panel_surface.get_rect(),
        border_radius=12,
    )
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    return panel_surface
