"""Виджет просмотра: масштаб, «до/после» по пробелу, пипетка.

Принципы:
- SRP: отвечает только за показ изображения и перевод координат канвы в пиксели.
- Виджет не знает о фильтрах: получает готовые `PIL.Image` от контроллера.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from photocraft.ui.zoom import fit_zoom, step_zoom

_CHECKER_CELL = 12


def _checkerboard(size: Tuple[int, int]) -> Image.Image:
    """Шахматная подложка, чтобы прозрачный фон был виден."""
    w, h = size
    board = Image.new("RGBA", (w, h), (204, 204, 204, 255))
    dark = Image.new("RGBA", (_CHECKER_CELL, _CHECKER_CELL), (160, 160, 160, 255))
    for y in range(0, h, _CHECKER_CELL):
        for x in range((y // _CHECKER_CELL % 2) * _CHECKER_CELL, w, _CHECKER_CELL * 2):
            board.paste(dark, (x, y))
    return board


class ImageViewer(ctk.CTkFrame):
    """Канва с исходным и обработанным изображением."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        # Масштаб: − / значение / + / вписать
        zoom_bar = ctk.CTkFrame(self, fg_color="transparent")
        zoom_bar.grid(row=1, column=0, pady=(4, 0))
        self._zoom_val = ctk.StringVar(value="—")
        ctk.CTkButton(zoom_bar, text="−", width=32, command=lambda: self._step_zoom(-1)).grid(row=0, column=0, padx=2)
        ctk.CTkLabel(zoom_bar, textvariable=self._zoom_val, width=56).grid(row=0, column=1, padx=2)
        ctk.CTkButton(zoom_bar, text="+", width=32, command=lambda: self._step_zoom(1)).grid(row=0, column=2, padx=2)
        ctk.CTkButton(zoom_bar, text="Вписать", width=72, command=self.set_zoom_to_fit).grid(row=0, column=3, padx=(8, 2))

        self._original_image: Optional[Image.Image] = None
        self._processed_image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None

        self._scale_factor: float = 1.0
        self._zoom_percent: Optional[float] = None  # None: вписать в канву
        self._image_top_left: Tuple[int, int] = (0, 0)
        self._hold_before_active: bool = False
        self._picking: bool = False

        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int]], None]] = None
        self.on_pick: Optional[Callable[[int, int], None]] = None

        self._canvas.bind("<Configure>", lambda _e: self._render_image())
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", self._on_mouse_leave)
        self._canvas.bind("<ButtonPress-1>", self._on_click)

        # Mouse wheel zoom (cross-platform)
        self._canvas.bind("<MouseWheel>", lambda e: self._step_zoom(1 if e.delta > 0 else -1))
        self._canvas.bind("<Button-4>", lambda _e: self._step_zoom(1))
        self._canvas.bind("<Button-5>", lambda _e: self._step_zoom(-1))

        # Hold space to preview "before"
        self._canvas.bind("<KeyPress-space>", self._on_space_down)
        self._canvas.bind("<KeyRelease-space>", self._on_space_up)

    # ---- Public API ----
    def set_image(self, image: Image.Image) -> None:
        """Устанавливает исходное изображение, сбрасывает обработанное и масштаб."""
        self._original_image = image
        self._zoom_percent = None
        self._processed_image = None
        self._render_image()

    def set_processed_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает результат обработки (None — показать оригинал)."""
        self._processed_image = image
        self._render_image()

    def set_picking(self, active: bool) -> None:
        """Включает режим пипетки: следующий клик сообщает координаты через `on_pick`."""
        self._picking = active
        self._canvas.configure(cursor="crosshair" if active else "")

    def is_showing_processed(self) -> bool:
        """Показан ли сейчас результат (а не оригинал); координаты курсора относятся к нему."""
        return self._processed_image is not None and not self._hold_before_active

    def set_zoom_percent(self, zoom_percent: float) -> None:
        """Фиксированный масштаб в процентах."""
        self._zoom_percent = zoom_percent
        self._render_image()

    def set_zoom_to_fit(self) -> None:
        """Масштаб подстраивается под размер канвы."""
        self._zoom_percent = None
        self._render_image()

    def get_zoom_percent(self) -> float:
        return self._scale_factor * 100.0

    # ---- Internals ----
    def _step_zoom(self, direction: int) -> None:
        if self._original_image is None:
            return
        self.set_zoom_percent(step_zoom(self.get_zoom_percent(), direction))

    def _displayed_image(self) -> Optional[Image.Image]:
        if self._processed_image is not None and not self._hold_before_active:
            return self._processed_image
        return self._original_image

    def _render_image(self) -> None:
        self._canvas.delete("all")
        image = self._displayed_image()
        if image is None:
            return

        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = image.size
        zoom = self._zoom_percent if self._zoom_percent is not None else fit_zoom((img_w, img_h), (canvas_w, canvas_h))
        self._scale_factor = zoom / 100.0
        self._zoom_val.set(f"{zoom:.0f}%")
        scaled_w = max(1, int(img_w * self._scale_factor))
        scaled_h = max(1, int(img_h * self._scale_factor))

        resized = image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
        if resized.mode == "RGBA":
            composed = _checkerboard(resized.size)
            composed.alpha_composite(resized)
            resized = composed

        self._image_top_left = ((canvas_w - scaled_w) // 2, (canvas_h - scaled_h) // 2)
        self._tk_image = ImageTk.PhotoImage(resized)
        self._canvas.create_image(*self._image_top_left, image=self._tk_image, anchor="nw")

    def _canvas_to_image_coords(self, cx: int, cy: int) -> Tuple[Optional[int], Optional[int]]:
        image = self._displayed_image()
        if image is None:
            return None, None
        ox, oy = self._image_top_left
        x = int((cx - ox) / self._scale_factor)
        y = int((cy - oy) / self._scale_factor)
        img_w, img_h = image.size
        if 0 <= x < img_w and 0 <= y < img_h and cx >= ox and cy >= oy:
            return x, y
        return None, None

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    def _on_mouse_move(self, event: tk.Event) -> None:
        if self.on_cursor_move is None:
            return
        x, y = self._canvas_to_image_coords(event.x, event.y)
        self.on_cursor_move(x, y)

    def _on_mouse_leave(self, _event: tk.Event) -> None:
        if self.on_cursor_move:
            self.on_cursor_move(None, None)

    def _on_click(self, event: tk.Event) -> None:
        self._canvas.focus_set()
        if not self._picking or self.on_pick is None:
            return
        x, y = self._canvas_to_image_coords(event.x, event.y)
        if x is None or y is None:
            return
        self.on_pick(x, y)

    def _on_space_down(self, _event: tk.Event) -> None:
        if not self._hold_before_active:
            self._hold_before_active = True
            self._render_image()

    def _on_space_up(self, _event: tk.Event) -> None:
        if self._hold_before_active:
            self._hold_before_active = False
            self._render_image()
