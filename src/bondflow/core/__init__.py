"""
Core: доменные модели, ценовой кодек, справочные данные и KeyedStore.

Модуль не зависит от внешних систем (файлы, GUI, хранилища истории).
"""
