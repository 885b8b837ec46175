from django.apps import AppConfig
from django.db.backends.signals import connection_created


class DirectoryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'directory'

    def ready(self):
        from directory.services.search import register_sqlite_functions

        connection_created.connect(register_sqlite_functions, dispatch_uid='directory_sqlite_functions')
