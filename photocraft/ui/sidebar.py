"""Боковая панель: открытие файла, информация, параметры режимов, экспорт.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk

from photocraft.config import get_config
from photocraft.models.image_model import ImageData
from photocraft.models.pixel_buffer import Color, CropRect
from photocraft.models.presets import EXPORT_PRESETS, PASSPORT_PRESETS
from photocraft.models.settings import (
    BackgroundSettings,
    CartoonSettings,
    EnhanceSettings,
    MemeSettings,
    PassportSettings,
    ProcessingMode,
    ProcessingSettings,
)
from photocraft.services.color_service import rgb_to_hex

# вкладка → режим обработки
_TABS: Tuple[Tuple[str, ProcessingMode], ...] = (
    ("Мультфильм", ProcessingMode.CARTOONIFY),
    ("Фон", ProcessingMode.BACKGROUND),
    ("Документы", ProcessingMode.PASSPORT),
    ("Мем", ProcessingMode.MEME),
    ("Улучшение", ProcessingMode.ENHANCE),
    ("Реставрация", ProcessingMode.RESTORE),
)


class _LabeledSlider:
    """Подпись + слайдер + значение; пересчёт при каждом движении."""
    def __init__(
        self,
        master: ctk.CTkFrame,
        row: int,
        text: str,
        from_: float,
        to: float,
        value: float,
        on_change: Callable[[], None],
        fmt: str = "{:.0f}",
    ) -> None:
        self._fmt = fmt
        self._on_change = on_change
        self._value = ctk.StringVar(value=fmt.format(value))
        ctk.CTkLabel(master, text=text).grid(row=row, column=0, padx=6, pady=(4, 0), sticky="w")
        self._slider = ctk.CTkSlider(master, from_=from_, to=to, number_of_steps=int(to - from_), command=self._changed)
        self._slider.set(value)
        self._slider.grid(row=row + 1, column=0, padx=6, pady=(0, 2), sticky="ew")
        ctk.CTkLabel(master, textvariable=self._value, width=48, anchor="w").grid(
            row=row + 1, column=1, padx=(0, 6), sticky="w"
        )

    def get(self) -> float:
        return float(self._slider.get())

    def set(self, value: float) -> None:
        self._slider.set(value)
        self._value.set(self._fmt.format(value))

    def _changed(self, value: float) -> None:
        self._value.set(self._fmt.format(value))
        self._on_change()


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, курсор, режимы, экспорт."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_export: Optional[Callable[[], None]] = None
        self.on_settings_change: Optional[Callable[[], None]] = None
        self.on_pick_toggle: Optional[Callable[[bool], None]] = None
        self.on_reset: Optional[Callable[[], None]] = None
        self._picking = False

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=0, column=0, padx=8, pady=(8, 8), sticky="ew")

        # Info section
        self._info_val = ctk.StringVar(value="—")
        self._cursor_val = ctk.StringVar(value="—")
        self._status_val = ctk.StringVar(value="")
        ctk.CTkLabel(self, textvariable=self._info_val, wraplength=280, anchor="w", justify="left").grid(
            row=1, column=0, padx=8, pady=(0, 2), sticky="ew"
        )
        ctk.CTkLabel(self, textvariable=self._cursor_val, anchor="w", justify="left").grid(
            row=2, column=0, padx=8, pady=(0, 6), sticky="ew"
        )

        # Режимы обработки: по вкладке на режим
        self._tabs = ctk.CTkTabview(self, command=self._emit_settings_change)
        self._tabs.grid(row=3, column=0, padx=8, pady=(0, 8), sticky="nsew")
        self.grid_rowconfigure(3, weight=1)
        for name, _mode in _TABS:
            tab = self._tabs.add(name)
            tab.grid_columnconfigure(0, weight=1)

        self._build_cartoon_tab(self._tabs.tab("Мультфильм"))
        self._build_background_tab(self._tabs.tab("Фон"))
        self._build_passport_tab(self._tabs.tab("Документы"))
        self._build_meme_tab(self._tabs.tab("Мем"))
        self._build_enhance_tab(self._tabs.tab("Улучшение"))
        ctk.CTkLabel(
            self._tabs.tab("Реставрация"),
            text="Шумоподавление 3×3 и мягкая резкость.\nПараметров нет.",
            justify="left",
        ).grid(row=0, column=0, padx=6, pady=6, sticky="w")

        self._reset_btn = ctk.CTkButton(self, text="Показать оригинал", command=self._emit_reset)
        self._reset_btn.grid(row=4, column=0, padx=8, pady=(0, 8), sticky="ew")

        # Экспорт
        export = ctk.CTkFrame(self)
        export.grid(row=5, column=0, padx=8, pady=(0, 8), sticky="ew")
        export.grid_columnconfigure(0, weight=1)
        self._format_menu = ctk.CTkOptionMenu(export, values=list(EXPORT_PRESETS), command=self._on_format_change)
        default_format = get_config().export_format
        if default_format not in EXPORT_PRESETS:
            default_format = "png"
        self._format_menu.set(default_format)
        self._format_menu.grid(row=0, column=0, padx=6, pady=(6, 2), sticky="w")
        self._quality = _LabeledSlider(
            export, 1, "Качество:", 0, 100, EXPORT_PRESETS[default_format].quality * 100, lambda: None
        )
        ctk.CTkButton(export, text="Экспорт…", command=self._emit_export).grid(
            row=3, column=0, columnspan=2, padx=6, pady=(4, 6), sticky="ew"
        )

        ctk.CTkLabel(self, textvariable=self._status_val, wraplength=280, anchor="w", justify="left",
                     text_color="#d9534f").grid(row=6, column=0, padx=8, pady=(0, 8), sticky="ew")

    # ---- Построение вкладок ----
    def _build_cartoon_tab(self, tab: ctk.CTkFrame) -> None:
        change = self._emit_settings_change
        self._cartoon_levels = _LabeledSlider(tab, 0, "Уровни цвета:", 2, 16, 8, change)
        self._cartoon_edges = _LabeledSlider(tab, 2, "Сила контуров:", 0, 100, 50, change)

    def _build_background_tab(self, tab: ctk.CTkFrame) -> None:
        change = self._emit_settings_change
        self._bg_tolerance = _LabeledSlider(tab, 0, "Допуск, %:", 0, 100, 30, change)
        self._bg_key = ctk.StringVar(value="#00ff00")
        self._bg_replacement = ctk.StringVar(value="#ffffff")
        ctk.CTkLabel(tab, text="Цвет фона (HEX):").grid(row=2, column=0, padx=6, pady=(4, 0), sticky="w")
        key_entry = ctk.CTkEntry(tab, textvariable=self._bg_key)
        key_entry.grid(row=3, column=0, padx=6, pady=(0, 2), sticky="ew")
        ctk.CTkLabel(tab, text="Замена (белый = прозрачный):").grid(row=4, column=0, padx=6, pady=(4, 0), sticky="w")
        repl_entry = ctk.CTkEntry(tab, textvariable=self._bg_replacement)
        repl_entry.grid(row=5, column=0, padx=6, pady=(0, 2), sticky="ew")
        for entry in (key_entry, repl_entry):
            entry.bind("<Return>", self._on_entry_commit)
            entry.bind("<FocusOut>", self._on_entry_commit)

        self._pick_btn = ctk.CTkButton(tab, text="Пипетка", command=self._toggle_pick)
        self._pick_btn.grid(row=6, column=0, padx=6, pady=(6, 2), sticky="w")
        self._bg_smart = ctk.BooleanVar(value=False)
        ctk.CTkCheckBox(tab, text="Определить фон автоматически", variable=self._bg_smart, command=change).grid(
            row=7, column=0, padx=6, pady=(6, 6), sticky="w"
        )

    def _build_passport_tab(self, tab: ctk.CTkFrame) -> None:
        change = self._emit_settings_change
        names = [preset.name for preset in PASSPORT_PRESETS]
        self._preset_menu = ctk.CTkOptionMenu(tab, values=names, command=lambda _v: change())
        self._preset_menu.set(names[0])
        self._preset_menu.grid(row=0, column=0, padx=6, pady=(6, 2), sticky="ew")
        self._crop_x = _LabeledSlider(tab, 1, "Слева, %:", 0, 100, 10, change)
        self._crop_y = _LabeledSlider(tab, 3, "Сверху, %:", 0, 100, 10, change)
        self._crop_w = _LabeledSlider(tab, 5, "Ширина, %:", 1, 100, 80, change)
        self._crop_h = _LabeledSlider(tab, 7, "Высота, %:", 1, 100, 80, change)

    def _build_meme_tab(self, tab: ctk.CTkFrame) -> None:
        change = self._emit_settings_change
        self._meme_top = ctk.StringVar(value="")
        self._meme_bottom = ctk.StringVar(value="")
        self._meme_color = ctk.StringVar(value="#ffffff")
        self._meme_outline_color = ctk.StringVar(value="#000000")
        self._meme_font = ctk.StringVar(value="Impact")
        rows = (
            ("Верхний текст:", self._meme_top),
            ("Нижний текст:", self._meme_bottom),
            ("Цвет текста:", self._meme_color),
            ("Цвет обводки:", self._meme_outline_color),
            ("Шрифт:", self._meme_font),
        )
        for i, (label, var) in enumerate(rows):
            ctk.CTkLabel(tab, text=label).grid(row=i * 2, column=0, padx=6, pady=(4, 0), sticky="w")
            entry = ctk.CTkEntry(tab, textvariable=var)
            entry.grid(row=i * 2 + 1, column=0, padx=6, pady=(0, 2), sticky="ew")
            entry.bind("<Return>", self._on_entry_commit)
            entry.bind("<FocusOut>", self._on_entry_commit)
        self._meme_size = _LabeledSlider(tab, 10, "Размер шрифта:", 10, 120, 40, change)
        self._meme_outline = ctk.BooleanVar(value=True)
        ctk.CTkCheckBox(tab, text="Обводка", variable=self._meme_outline, command=change).grid(
            row=12, column=0, padx=6, pady=(4, 6), sticky="w"
        )

    def _build_enhance_tab(self, tab: ctk.CTkFrame) -> None:
        change = self._emit_settings_change
        self._brightness = _LabeledSlider(tab, 0, "Яркость:", -100, 100, 0, change)
        self._contrast = _LabeledSlider(tab, 2, "Контраст:", -100, 100, 0, change)
        self._saturation = _LabeledSlider(tab, 4, "Насыщенность:", -100, 100, 0, change)
        self._sharpness = _LabeledSlider(tab, 6, "Резкость:", 0, 100, 0, change)

    # ---- Public API ----
    def set_image_info(self, image_data: ImageData) -> None:
        """Отображает метаданные загруженного изображения."""
        self._info_val.set(
            f"{image_data.path.name}\n{image_data.width} × {image_data.height} px, "
            f"{image_data.source_mode}, {self._format_size(image_data.size_bytes)}"
        )

    def update_cursor_info(self, x: Optional[int], y: Optional[int], color: Optional[Color]) -> None:
        """Обновляет координаты и цвет под курсором."""
        if x is None or y is None or color is None:
            self._cursor_val.set("—")
            return
        self._cursor_val.set(f"({x}, {y})  RGB {color.r}, {color.g}, {color.b}  {rgb_to_hex(color)}")

    def set_status(self, text: str) -> None:
        self._status_val.set(text)

    def set_key_color(self, hex_color: str) -> None:
        """Принимает цвет с пипетки и выключает её."""
        self._bg_key.set(hex_color)
        self._set_picking(False)

    def get_mode(self) -> ProcessingMode:
        current = self._tabs.get()
        for name, mode in _TABS:
            if name == current:
                return mode
        return ProcessingMode.CARTOONIFY

    def get_settings(self) -> ProcessingSettings:
        """Собирает настройки всех режимов из текущих значений виджетов."""
        names = [preset.name for preset in PASSPORT_PRESETS]
        preset_name = self._preset_menu.get()
        return ProcessingSettings(
            cartoon=CartoonSettings(
                color_levels=int(round(self._cartoon_levels.get())),
                edge_strength=self._cartoon_edges.get(),
            ),
            background=BackgroundSettings(
                tolerance=self._bg_tolerance.get(),
                key_color=self._bg_key.get().strip(),
                replacement_color=self._bg_replacement.get().strip(),
                smart=bool(self._bg_smart.get()),
            ),
            passport=PassportSettings(
                preset_index=names.index(preset_name) if preset_name in names else 0,
                crop_rect=CropRect(
                    self._crop_x.get() / 100.0,
                    self._crop_y.get() / 100.0,
                    self._crop_w.get() / 100.0,
                    self._crop_h.get() / 100.0,
                ),
            ),
            meme=MemeSettings(
                top_text=self._meme_top.get(),
                bottom_text=self._meme_bottom.get(),
                font_size=int(round(self._meme_size.get())),
                text_color=self._meme_color.get().strip(),
                outline_color=self._meme_outline_color.get().strip(),
                use_outline=bool(self._meme_outline.get()),
                font_family=self._meme_font.get().strip() or "Impact",
            ),
            enhance=EnhanceSettings(
                brightness=self._brightness.get(),
                contrast=self._contrast.get(),
                saturation=self._saturation.get(),
                sharpness=self._sharpness.get(),
            ),
        )

    def get_export_params(self) -> Tuple[str, float]:
        """Возвращает (формат, качество 0–100)."""
        return self._format_menu.get(), self._quality.get()

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_export(self) -> None:
        if self.on_export:
            self.on_export()

    def _emit_reset(self) -> None:
        if self.on_reset:
            self.on_reset()

    def _emit_settings_change(self) -> None:
        if self.get_mode() is not ProcessingMode.BACKGROUND and self._picking:
            self._set_picking(False)
        if self.on_settings_change:
            self.on_settings_change()

    def _on_entry_commit(self, _event: object) -> None:
        self._emit_settings_change()

    def _on_format_change(self, value: str) -> None:
        self._quality.set(EXPORT_PRESETS[value].quality * 100)

    def _toggle_pick(self) -> None:
        self._set_picking(not self._picking)

    def _set_picking(self, active: bool) -> None:
        self._picking = active
        self._pick_btn.configure(text="Кликните по фону…" if active else "Пипетка")
        if self.on_pick_toggle:
            self.on_pick_toggle(active)

    # ---- Helpers ----
    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        thresholds = [("Б", 1024), ("КБ", 1024**2), ("МБ", 1024**3)]
        for label, limit in thresholds:
            if size_bytes < limit:
                if label == "Б":
                    return f"{size_bytes} {label}"
                value = size_bytes / (limit // 1024)
                return f"{value:.1f} {label}"
        return f"{size_bytes / 1024**3:.1f} ГБ"
