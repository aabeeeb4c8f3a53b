from django.apps import AppConfig


class InputValidationConfig(AppConfig):
    """
    Configuration for the Input Validation app.

    This app provides:
    - Identifier and comment validators
    - A tokenizer-based markup sanitizer
    - DRF serializers collecting every violation of a request
    - Resolution of request bodies into validated shapes
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'input_validation'
    verbose_name = 'Input Validation & Sanitization'
