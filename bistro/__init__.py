"""Бизнес-правила ресторана: заказы, меню, брони."""
import logging

__version__ = "0.1.0"

# Библиотека не настраивает логирование сама, это делает setup_logging()
logging.getLogger("bistro").addHandler(logging.NullHandler())
