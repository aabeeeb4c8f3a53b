from django.apps import AppConfig


class ServerConfig(AppConfig):
    name = 'server'
    verbose_name = 'Comments API'

    def ready(self):
        # Register the security system checks
        from server.security import checks  # noqa: F401
