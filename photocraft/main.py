"""Точка входа в приложение."""
from photocraft.app import PhotoCraftApp


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    app = PhotoCraftApp()
    app.mainloop()


if __name__ == "__main__":
    main()
