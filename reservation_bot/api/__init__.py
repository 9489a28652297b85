from reservation_bot.api.app import create_app

__all__ = ["create_app"]
