from django.apps import AppConfig


class DocmarkupConfig(AppConfig):
    name = 'docmarkup'
    verbose_name = 'Documentation markup'
