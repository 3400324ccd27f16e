"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.

Обработка откладывается до ближайшего простоя цикла Tk. Каждый запрос
получает номер поколения; вытесненный более новым запрос не выполняется, а
уже начатый фильтр не прерывается.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from tkinter import TclError, filedialog
from typing import Optional

import customtkinter as ctk

from photocraft.errors import FilterError
from photocraft.models.image_model import ImageData
from photocraft.models.pixel_buffer import PixelBuffer
from photocraft.services.color_service import color_at, rgb_to_hex
from photocraft.services.image_service import ImageService
from photocraft.services.process_service import ProcessService
from photocraft.ui.image_viewer import ImageViewer
from photocraft.ui.sidebar import Sidebar
from photocraft.utils.logging import get_logger

logger = get_logger()


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Загрузка изображений и экспорт через `ImageService`.
    - Запуск конвейера выбранного режима через `ProcessService`.
    - Пипетка: цвет пикселя оригинала → ключевой цвет удаления фона.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    window: ctk.CTk

    _image_service: ImageService = field(default_factory=ImageService)
    _process_service: ProcessService = field(default_factory=ProcessService)
    _current_image: Optional[ImageData] = None
    _processed: Optional[PixelBuffer] = None
    _generation: int = 0
    _pending_after: Optional[str] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_export = self._handle_export
        self.sidebar.on_settings_change = self._schedule_processing
        self.sidebar.on_pick_toggle = self.viewer.set_picking
        self.sidebar.on_reset = self._handle_reset
        self.viewer.on_cursor_move = self._handle_cursor_move
        self.viewer.on_pick = self._handle_pick

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        try:
            image_data = self._image_service.load_image(file_path)
        except (FileNotFoundError, ValueError) as exc:
            logger.warning("cannot open %s: %s", file_path, exc)
            self.sidebar.set_status(str(exc))
            return

        self._current_image = image_data
        self._processed = None
        self.sidebar.set_status("")
        self.sidebar.set_image_info(image_data)
        self.viewer.set_image(image_data.buffer.to_pil())
        self._schedule_processing()

    def _handle_export(self) -> None:
        buffer = self._processed or (self._current_image.buffer if self._current_image else None)
        if buffer is None:
            return
        fmt, quality = self.sidebar.get_export_params()
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить результат",
                defaultextension=f".{fmt}",
                initialfile=f"photocraft-{self.sidebar.get_mode().value}.{fmt}",
                filetypes=((fmt.upper(), f"*.{fmt}"),),
            )
        except TclError:
            return
        if not file_path:
            return
        try:
            self._image_service.export_image(buffer, file_path, quality)
        except (OSError, FilterError) as exc:
            logger.exception("export failed")
            self.sidebar.set_status(f"Не удалось сохранить: {exc}")

    def _handle_reset(self) -> None:
        self._generation += 1
        self._processed = None
        self.viewer.set_processed_image(None)

    def _sampling_buffer(self) -> Optional[PixelBuffer]:
        """Буфер, из которого пипетка читает цвет по координатам показанного изображения.

        Если результат сохраняет геометрию оригинала, цвет берётся из оригинала:
        ключ фона выбирается по исходным пикселям, а не по уже заменённым.
        Если геометрия другая (фото на документы), читается сам показанный результат.
        """
        if self._current_image is None:
            return None
        original = self._current_image.buffer
        if (
            self._processed is not None
            and self.viewer.is_showing_processed()
            and self._processed.size != original.size
        ):
            return self._processed
        return original

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int]) -> None:
        buffer = self._sampling_buffer()
        if buffer is None or x is None or y is None:
            self.sidebar.update_cursor_info(None, None, None)
            return
        try:
            color = color_at(buffer, x, y)
        except FilterError:
            self.sidebar.update_cursor_info(None, None, None)
            return
        self.sidebar.update_cursor_info(x, y, color)

    def _handle_pick(self, x: int, y: int) -> None:
        buffer = self._sampling_buffer()
        if buffer is None:
            return
        try:
            color = color_at(buffer, x, y)
        except FilterError as exc:
            self.sidebar.set_status(str(exc))
            return
        self.sidebar.set_key_color(rgb_to_hex(color))
        self._schedule_processing()

    # ---- Processing ----
    def _schedule_processing(self) -> None:
        """Откладывает обработку до простоя; более новый запрос вытесняет старый."""
        if self._current_image is None:
            return
        self._generation += 1
        token = self._generation
        if self._pending_after is not None:
            self.window.after_cancel(self._pending_after)
        self._pending_after = self.window.after_idle(lambda: self._run_processing(token))

    def _run_processing(self, token: int) -> None:
        self._pending_after = None
        if token != self._generation or self._current_image is None:
            return

        mode = self.sidebar.get_mode()
        settings = self.sidebar.get_settings()
        try:
            result = self._process_service.process(mode, self._current_image.buffer, settings)
        except FilterError as exc:
            logger.exception("processing failed (mode=%s)", mode.value)
            self.sidebar.set_status(str(exc))
            return

        self._processed = result
        self.sidebar.set_status("")
        self.viewer.set_processed_image(result.to_pil())
