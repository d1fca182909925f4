class CollaborationError(Exception):
    """Базовая ошибка ядра совместного доступа"""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class Unauthenticated(CollaborationError):
    """Нет идентичности вызывающего"""

    status_code = 401

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)


class NotFound(CollaborationError):
    """Документ, приглашение или запрос не найдены"""

    status_code = 404


class Unauthorized(CollaborationError):
    """Пользователь известен, но не владелец и не имеет нужной роли"""

    status_code = 403

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(detail)


class Conflict(CollaborationError):
    """Дубликат ожидающего приглашения или уже обработанное приглашение"""

    status_code = 409


class Expired(CollaborationError):
    """Приглашение просрочено на момент принятия"""

    status_code = 410

    def __init__(self, detail: str = "Invitation expired"):
        super().__init__(detail)
