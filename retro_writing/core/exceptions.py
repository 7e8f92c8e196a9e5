"""
Ошибки приложения.

Каждый класс знает свой HTTP-код; обработчики в `retro_writing.main`
превращают их в ответ вида `{"success": false, "message": ...}`.
Всё, что не является `AppError`, отдаётся клиенту как 500 с общим сообщением.
"""


class AppError(Exception):
    """Базовая ошибка приложения"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Входные данные нарушают ограничение модели"""

    status_code = 400
    default_message = "Validation failed"


class InvalidArgumentError(AppError):
    """Некорректный параметр запроса (пустой поисковый запрос, кривой id)"""

    status_code = 400
    default_message = "Invalid argument"


class NotFoundError(AppError):
    """Нет подходящей записи, принадлежащей пользователю"""

    status_code = 404
    default_message = "Not found"


class AuthError(AppError):
    """Нет токена, токен невалиден или неверные учётные данные"""

    status_code = 401
    default_message = "Not authorized"
